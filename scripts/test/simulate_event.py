# scripts/test/simulate_event.py
"""Send test event batches to a running backend."""

import argparse
import random
import requests
from datetime import datetime, timezone

BACKEND_URL = "http://localhost:3000/api/v1"


def make_event(event_type, confidence):
    return {
        "type": event_type,
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "confidence": confidence if confidence is not None else round(random.uniform(0.5, 1.0), 2),
    }


def simulate_batch(backend, camera_id, event_type, confidence, count):
    batch = [make_event(event_type, confidence) for _ in range(count)]
    resp = requests.post(f"{backend}/cameras/{camera_id}/events", json=batch, timeout=10)
    print(f"{'✅' if resp.ok else '❌'} {count}× {event_type} → {camera_id} | HTTP {resp.status_code}: {resp.json()}")


def show_camera(backend, camera_id):
    resp = requests.get(f"{backend}/cameras/{camera_id}", timeout=10)
    if resp.ok:
        last = resp.json().get("last_event") or {}
        print(f"📷 {camera_id} status={resp.json().get('status')} last_event={last.get('summary')}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate camera events for testing")
    parser.add_argument("--backend", default=BACKEND_URL)
    parser.add_argument("--camera", default="cam1")
    parser.add_argument("--event", default="motion")
    parser.add_argument("--confidence", type=float, default=None,
                        help="Fixed confidence (0-1); random when omitted. Use 1.5 to see a rejection.")
    parser.add_argument("--count", type=int, default=1)
    args = parser.parse_args()

    simulate_batch(args.backend, args.camera, args.event, args.confidence, args.count)
    show_camera(args.backend, args.camera)
