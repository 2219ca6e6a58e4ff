#!/usr/bin/env python3
"""
Create (or update) the EcoMart assistant with the locally registered tools.

Usage:
    python scripts/create_assistant.py [--model gpt-4o]

When OPENAI_ASSISTANT_ID is set the existing assistant is updated, otherwise a
new one is created and its id is printed so it can be added to the .env file.
"""

import argparse
import os
from dotenv import load_dotenv
from openai import OpenAI
from ecomart.bot.functions import ShippingFunctions, ToolDispatcher

load_dotenv()

INSTRUCTIONS = (
    "You are the customer service assistant of EcoMart, an online store of sustainable products. "
    "Answer questions about products, orders and deliveries in a friendly and concise way. "
    "When a customer asks how much shipping costs, call the calculate_shipping function with the "
    "origin and destination states, the package weight and the number of products."
)


def main():
    parser = argparse.ArgumentParser(description="Create or update the EcoMart assistant")
    parser.add_argument("--name", default="EcoMart Assistant")
    parser.add_argument("--model", default=os.getenv("OPENAI_DEFAULT_MODEL", "gpt-4o"))
    args = parser.parse_args()

    client = OpenAI()
    tools = ToolDispatcher(ShippingFunctions()).tool_definitions()
    print(f"Tools: {', '.join(tool['function']['name'] for tool in tools)}")

    assistant_id = os.getenv("OPENAI_ASSISTANT_ID")
    if assistant_id:
        assistant = client.beta.assistants.update(
            assistant_id=assistant_id,
            name=args.name,
            instructions=INSTRUCTIONS,
            model=args.model,
            tools=tools,
        )
        print(f"✅ Assistant updated: {assistant.id}")
    else:
        assistant = client.beta.assistants.create(
            name=args.name,
            instructions=INSTRUCTIONS,
            model=args.model,
            tools=tools,
        )
        print(f"✅ Assistant created: {assistant.id}")
        print()
        print("Next Steps:")
        print(f"1. Add OPENAI_ASSISTANT_ID={assistant.id} to your .env file")
        print("2. Start the API: uvicorn ecomart.rest.main:app --reload")
        print("3. Run the demo: python simple_demo.py")


if __name__ == "__main__":
    main()
