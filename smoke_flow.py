"""
Complete user CRUD flow against a running server.
Creates a user, reads it back, updates it, checks duplicate/invalid
rejections and deletes it again. Leaves the store as it found it.

    python smoke_flow.py                       # http://localhost:3000
    USERDESK_URL=https://example.org python smoke_flow.py
"""

import json
import os
import sys
import uuid

import requests

BASE_URL = os.getenv("USERDESK_URL", "http://localhost:3000").rstrip("/")
TIMEOUT = 10


def print_section(title):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_response(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def expect(response, status):
    if response.status_code != status:
        print(f"\n❌ Expected HTTP {status}, got {response.status_code}")
        print_response(response.json())
        sys.exit(1)
    return response.json()


def main():
    print(f"\n🚀 UserDesk smoke test against {BASE_URL}")

    # ============================================================================
    # STEP 1: Health
    # ============================================================================
    print_section("STEP 1: Health check")
    health = expect(requests.get(f"{BASE_URL}/health", timeout=TIMEOUT), 200)
    print_response(health)
    before = health.get("totalUsers")

    # ============================================================================
    # STEP 2: Create
    # ============================================================================
    print_section("STEP 2: Create user")
    email = f"Smoke.{uuid.uuid4().hex[:8]}@Example.com"
    user = expect(requests.post(
        f"{BASE_URL}/api/users",
        json={"name": "  Smoke Test  ", "email": email, "image": ""},
        timeout=TIMEOUT
    ), 201)
    print_response(user)
    assert user["email"] == email.lower(), "email was not normalized"
    assert user["name"] == "Smoke Test", "name was not trimmed"

    # ============================================================================
    # STEP 3: Rejections
    # ============================================================================
    print_section("STEP 3: Duplicate and invalid input")
    duplicate = expect(requests.post(
        f"{BASE_URL}/api/users",
        json={"name": "Copy", "email": email.upper()},
        timeout=TIMEOUT
    ), 409)
    print(f"✅ Duplicate rejected: {duplicate['code']}")

    invalid = expect(requests.post(
        f"{BASE_URL}/api/users",
        json={"name": "Bob", "email": "not-an-email"},
        timeout=TIMEOUT
    ), 400)
    print(f"✅ Invalid email rejected: {invalid['code']}")

    # ============================================================================
    # STEP 4: Update
    # ============================================================================
    print_section("STEP 4: Update user")
    updated = expect(requests.put(
        f"{BASE_URL}/api/users/{user['id']}",
        json={"name": "Smoke Renamed", "email": email, "image": "https://example.com/a.png"},
        timeout=TIMEOUT
    ), 200)
    print_response(updated)
    assert updated["id"] == user["id"], "id changed on update"

    # ============================================================================
    # STEP 5: Delete
    # ============================================================================
    print_section("STEP 5: Delete user")
    expect(requests.delete(f"{BASE_URL}/api/users/{user['id']}", timeout=TIMEOUT), 200)
    gone = expect(requests.get(f"{BASE_URL}/api/users/{user['id']}", timeout=TIMEOUT), 404)
    print(f"✅ User gone: {gone['code']}")

    after = expect(requests.get(f"{BASE_URL}/api/users", timeout=TIMEOUT), 200)["count"]
    if before is not None and after != before:
        print(f"\n⚠️  User count changed from {before} to {after} (concurrent writers?)")

    print_section("🎉 FLOW COMPLETED SUCCESSFULLY!")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n❌ Test interrupted by user")
    except requests.RequestException as e:
        print(f"\n\n❌ Request failed: {e}")
        sys.exit(1)
