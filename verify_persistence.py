"""
Persistence check across a server restart.

Books a parcel and appends a tracking event against a live uvicorn process,
restarts it, then confirms the parcel and its tracking history are still there.
Needs a reachable DATABASE_URL and REDIS_URL.
"""

import time
import subprocess
import httpx
import sys
import os
import signal
import uuid

from backend.app.core.jwt import create_access_token

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"]


def bearer(email, role):
    token = create_access_token({"sub": email, "name": email.split("@")[0], "role": role})
    return {"Authorization": f"Bearer {token}"}


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def stop(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    merchant = bearer("persist.merchant@parcels.io", "MERCHANT")
    rider = bearer("persist.rider@parcels.io", "RIDER")
    tracking_code = f"PERSIST-{uuid.uuid4().hex[:8].upper()}"

    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"}
    )

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stderr:", server_logs[1].decode())
            raise RuntimeError("Server start failed")

        print(f"\n--- [Step 2] Booking parcel {tracking_code} ---")
        resp = httpx.post(
            f"{BASE_URL}{API_PREFIX}/parcels",
            json={
                "tracking_code": tracking_code,
                "parcel_type": "document",
                "fare": 60.0,
                "sender_region": "Dhaka",
                "sender_warehouse": "Mirpur Hub",
                "receiver_region": "Khulna",
                "receiver_warehouse": "Sonadanga Hub",
            },
            headers=merchant,
        )
        if resp.status_code != 201:
            raise RuntimeError(f"Booking failed: {resp.status_code} {resp.text}")
        parcel_id = resp.json()["id"]
        print(f"✅ Parcel booked (id={parcel_id})")

        resp = httpx.post(
            f"{BASE_URL}{API_PREFIX}/tracking",
            json={"tracking_code": tracking_code, "parcel_id": parcel_id, "status": "PickedUp"},
            headers=rider,
        )
        if resp.status_code != 200:
            raise RuntimeError(f"Tracking append failed: {resp.status_code} {resp.text}")
        print("✅ Pickup recorded")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop(proc)

    time.sleep(2)  # port release

    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(SERVER_CMD, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    try:
        if not wait_for_server():
            raise RuntimeError("Server restart failed")

        print("\n--- [Step 5] Reading parcel back ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/parcels/{tracking_code}", headers=merchant)
        if resp.status_code != 200 or resp.json()["status"] != "PickedUp":
            raise RuntimeError(f"Parcel not persisted: {resp.status_code} {resp.text}")
        print("✅ Parcel persisted with status PickedUp")

        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/tracking/{parcel_id}", headers=merchant)
        statuses = [e["status"] for e in resp.json()]
        if statuses != ["Pending", "PickedUp"]:
            raise RuntimeError(f"Unexpected tracking history: {statuses}")
        print("✅ Tracking history persisted")

    finally:
        print("\n--- [Step 6] Stopping Server ---")
        stop(proc2)


if __name__ == "__main__":
    run_verification()
