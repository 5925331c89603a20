"""
Manual smoke run against a live Relief API.
Start the server first: python -m relief.api.app
Then run this: python scripts/smoke_api.py
"""

import json
import os

import requests

BASE_URL = os.getenv("RELIEF_API_URL", "http://localhost:8000")

SAMPLE_RESOURCE = {
    "name": "Smoke Test Shelter",
    "type": "shelter",
    "description": "Created by the smoke script",
    "location_name": "Smoke Test Gym",
    "address": "1 Test Street",
    "latitude": 40.7128,
    "longitude": -74.006,
    "status": "available",
    "quantity": 50,
}


def banner(title):
    print("\n" + "=" * 50)
    print(f"CHECK: {title}")
    print("=" * 50)


def show(response):
    print(f"Status Code: {response.status_code}")
    try:
        print(f"Response: {json.dumps(response.json(), indent=2)[:1500]}")
    except ValueError:
        print(f"Response: {response.text[:500]}")


def check_health():
    banner("Health Check")
    response = requests.get(f"{BASE_URL}/health")
    show(response)
    return response.status_code == 200


def check_login_invalid():
    banner("Login With Invalid Key")
    response = requests.post(f"{BASE_URL}/api/auth/login", json={"api_key": "invalid-key-123"})
    show(response)
    return response.status_code == 401


def login(api_key):
    banner("Login")
    response = requests.post(f"{BASE_URL}/api/auth/login", json={"api_key": api_key})
    show(response)
    if response.status_code == 200:
        return response.json()["token"]
    return None


def check_list_without_token():
    banner("List Without Token")
    response = requests.get(f"{BASE_URL}/api/resources")
    show(response)
    return response.status_code == 401


def check_list(headers):
    banner("List Resources (type=shelter)")
    response = requests.get(f"{BASE_URL}/api/resources", headers=headers, params={"type": "shelter"})
    show(response)
    return response.status_code == 200


def check_invalid_create(headers):
    banner("Create With Latitude Out Of Range")
    response = requests.post(
        f"{BASE_URL}/api/resources", headers=headers, json={**SAMPLE_RESOURCE, "latitude": 95},
    )
    show(response)
    return response.status_code == 400


def check_create_update_delete(headers):
    banner("Create / Update / Delete")
    response = requests.post(f"{BASE_URL}/api/resources", headers=headers, json=SAMPLE_RESOURCE)
    show(response)
    if response.status_code != 201:
        return False
    resource_id = response.json()["resource"]["id"]

    response = requests.put(
        f"{BASE_URL}/api/resources/{resource_id}", headers=headers,
        json={**SAMPLE_RESOURCE, "status": "low_stock", "quantity": 5},
    )
    show(response)
    if response.status_code != 200:
        return False

    response = requests.delete(f"{BASE_URL}/api/resources/{resource_id}", headers=headers)
    show(response)
    return response.status_code == 200


def check_map(headers):
    banner("Map Feed")
    response = requests.get(f"{BASE_URL}/api/resources/map", headers=headers)
    show(response)
    return response.status_code == 200


def check_logout(headers):
    banner("Logout")
    response = requests.post(f"{BASE_URL}/api/auth/logout", headers=headers)
    show(response)
    return response.status_code == 200


def main():
    print("=" * 50)
    print("Relief API Smoke Run")
    print("=" * 50)
    print(f"Base URL: {BASE_URL}")
    print("Make sure the API server is running!")

    api_key = input("Enter an API key (volunteer or admin): ").strip()
    if not api_key:
        print("ERROR: API key is required")
        return

    results = {}
    try:
        results["Health Check"] = check_health()
        results["Login Invalid"] = check_login_invalid()
        results["List Without Token"] = check_list_without_token()

        token = login(api_key)
        if token:
            headers = {"Authorization": f"Bearer {token}"}
            results["Login Valid"] = True
            results["List"] = check_list(headers)
            results["Invalid Create"] = check_invalid_create(headers)
            results["Create/Update/Delete"] = check_create_update_delete(headers)
            results["Map"] = check_map(headers)
            results["Logout"] = check_logout(headers)
        else:
            results["Login Valid"] = False
            print("\nERROR: Could not login. Remaining checks skipped.")
    except requests.RequestException as e:
        print(f"\n\nERROR: {e}")

    print("\n" + "=" * 50)
    print("SUMMARY")
    print("=" * 50)
    for name, ok in results.items():
        print(f"{'✓ PASS' if ok else '✗ FAIL'}: {name}")
    passed = sum(1 for v in results.values() if v)
    print(f"\nTotal: {passed}/{len(results)} checks passed")


if __name__ == "__main__":
    main()
