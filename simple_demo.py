#!/usr/bin/env python3
"""
Super simple EcoMart chatbot demo against the REST API.

Start the API first:
    uvicorn ecomart.rest.main:app --reload
"""

import requests

BASE_URL = "http://localhost:8000"


def main():
    print("🤖 Simple EcoMart Chatbot Demo")
    print("=" * 30)

    try:
        response = requests.get(f"{BASE_URL}/chat")
        response.raise_for_status()
        history = response.json()
        print(f"📜 {len(history)} messages in the current conversation")
        for message in history:
            print(f"   {message}")

        print("\nType a question (empty line to quit, /clear to start over)")
        while True:
            question = input("👤 You: ").strip()
            if not question:
                break
            if question == "/clear":
                requests.delete(f"{BASE_URL}/chat").raise_for_status()
                print("🧹 Conversation cleared")
                continue

            print("   ⏳ Waiting for the assistant...")
            response = requests.post(f"{BASE_URL}/chat", json={"question": question})
            response.raise_for_status()
            print(f"🤖 Assistant: {response.text}")

    except requests.exceptions.ConnectionError:
        print("❌ Can't connect to API server. Make sure it's running:")
        print("   uvicorn ecomart.rest.main:app --reload")

    except Exception as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    main()
