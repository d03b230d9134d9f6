"""
HYRULE CHAT CLIENT - Terminal client for the Hyrule Chat API
============================================================

PURPOSE:
Command-line interface for trying the API without building a frontend. Type
anything to talk to Link through POST /chat, or use a slash command to browse
the catalog.

USAGE:
    python chat_client.py

    Make sure the server is running first: python run.py

COMMANDS:
    /characters   - List all characters
    /creators     - List all creators
    /search <q>   - Search characters by name
    /quit or /exit - Exit the client
"""

import requests


# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------
# API base URL; change if your server runs on a different host or port.
BASE_URL = "http://localhost:8080"


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "="*60)
    print("🗡️  Hyrule Chat - Talk to Link")
    print("="*60)
    print("\nCommands:")
    print("  /characters  - List characters")
    print("  /creators    - List creators")
    print("  /search <q>  - Search characters by name")
    print("  /quit        - Exit")
    print("="*60 + "\n")


def get_user_input():
    """Get user's input, or None on Ctrl+C / Ctrl+D."""
    try:
        return input("\nYou: ").strip()
    except (KeyboardInterrupt, EOFError):
        return None


def _error_text(response):
    """Prefer the API's detail message; fall back to status and raw body."""
    try:
        err = response.json()
        if isinstance(err.get("detail"), str):
            return f"❌ {err['detail']}"
    except ValueError:
        pass
    return f"❌ Error: {response.status_code} - {response.text}"


# -----------------------------------------------------------------------------
# API CALLS
# -----------------------------------------------------------------------------

def send_message(message):
    """
    Send a message to POST /chat and return Link's reply (or an error message).
    The server waits up to its own Gemini timeout, so we allow a little longer.
    """
    try:
        response = requests.post(f"{BASE_URL}/chat", json={"message": message}, timeout=40)
        if response.status_code == 200:
            return response.json().get("reply", "No reply")
        return _error_text(response)
    except requests.exceptions.ConnectionError:
        return "❌ Cannot connect to backend. Start it with: python run.py"
    except requests.exceptions.Timeout:
        return "❌ Request timed out."


def fetch_records(path, params=None):
    """GET a catalog endpoint and format the records, one per line."""
    try:
        response = requests.get(f"{BASE_URL}{path}", params=params, timeout=10)
    except requests.exceptions.ConnectionError:
        return "❌ Cannot connect to backend. Start it with: python run.py"
    except requests.exceptions.Timeout:
        return "❌ Request timed out."

    if response.status_code != 200:
        return _error_text(response)

    records = response.json()
    if not records:
        return "No matches"
    lines = []
    for record in records:
        detail = record.get("description") or record.get("role", "")
        lines.append(f"  {record['id']}. {record['name']} - {detail}")
    return "\n".join(lines)


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    print_header()

    while True:
        user_input = get_user_input()
        if user_input is None or user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break
        if not user_input:
            continue

        if user_input == "/characters":
            print(fetch_records("/characters"))
        elif user_input == "/creators":
            print(fetch_records("/creators"))
        elif user_input == "/search" or user_input.startswith("/search "):
            query = user_input[len("/search"):].strip()
            print(fetch_records("/characters/search", params={"q": query}))
        elif user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
        else:
            print("🗡️  Link: ", end="", flush=True)
            print(send_message(user_input))


# Run the interactive loop when this file is executed (python chat_client.py).
if __name__ == "__main__":
    main()
