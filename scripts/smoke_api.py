import argparse
import time

import requests


def smoke_test(base_url: str):
    """Hit every endpoint of a running server and print a short summary."""
    cases = [
        {},
        {"frameworks": "evalite"},
        {"use_cases": "rag", "difficulties": "beginner"},
        {"tags": "safety,production"},
    ]

    for params in cases:
        print(f"\n🚀 GET /api/v1/evals {params or '(no filters)'}")
        start_time = time.time()
        try:
            response = requests.get(f"{base_url}/api/v1/evals", params=params)
            response.raise_for_status()
            data = response.json()
            elapsed = time.time() - start_time
            print(f"✅ {data['filtered']}/{data['total']} evals (Took {elapsed:.2f}s)")
            for item in data["items"][:3]:
                print(f"    * {item['path']}: {item['title']}")
        except requests.exceptions.ConnectionError:
            print("❌ Error: Could not connect to server. Is uvicorn running?")
            return
        except requests.exceptions.HTTPError as e:
            print(f"❌ HTTP Error: {e}")
            print(response.text)

    listing = requests.get(f"{base_url}/api/v1/evals").json()
    paths = [item["path"] for item in listing["items"]][:2]
    if paths:
        response = requests.get(f"{base_url}/api/v1/evals/compare", params={"compare": ",".join(paths)})
        print(f"\n⚖️  Compare {paths}: can_compare={response.json().get('can_compare')}")

        response = requests.post(f"{base_url}/api/analytics/view", json={"path": paths[0]})
        print(f"👁️  View beacon: {response.status_code}")
        stats = requests.get(f"{base_url}/api/analytics/stats", params={"path": paths[0]})
        print(f"📈 Stats: {stats.json()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Smoke test a running EvalHub server")
    parser.add_argument("--base-url", default="http://localhost:8000")
    smoke_test(parser.parse_args().base_url)
