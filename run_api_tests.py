"""Smoke-check a running instance: python run_api_tests.py [base_url]"""
import json
import sys
import urllib.error
import urllib.request

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080"


def get(path):
    req = urllib.request.Request(f"{BASE}{path}")
    try:
        with urllib.request.urlopen(req) as r:
            return r.status, r.headers.get("Content-Type", ""), r.read().decode()
    except urllib.error.HTTPError as e:
        return e.code, e.headers.get("Content-Type", ""), e.read().decode()


def section(title):
    print(f"\n{'='*60}")
    print(f"### {title} ###")
    print('='*60)


def label(name):
    print(f"\n--- {name} ---")


def out(status, content_type, body):
    print(f"HTTP {status} ({content_type or 'no content-type'})")
    if content_type.startswith("application/json"):
        print(json.dumps(json.loads(body), indent=2, ensure_ascii=False))
    else:
        print(repr(body))


section("PROBES")

label("GET / (load balancer probe, empty body)")
out(*get("/"))

label("GET /health")
out(*get("/health"))

section("CIRCULATING SUPPLY")

label("GET /api/v1/circulating-supply (JSON)")
status, content_type, body = get("/api/v1/circulating-supply")
out(status, content_type, body)

label("GET /v1/circulating-supply (plain text)")
text_status, text_type, text_body = get("/v1/circulating-supply")
out(text_status, text_type, text_body)

section("CHECKS")

if status == 503:
    print("not ready yet: some balances have not been fetched; retry after the first refresh")
elif status == 200 and text_status == 200:
    json_value = json.loads(body)["circulating_supply"]
    print(f"JSON value:  {json_value}")
    print(f"text value:  {text_body}")
    print("MATCH" if str(json_value) == text_body.strip() else "MISMATCH (a refresh landed between requests?)")
else:
    print(f"unexpected status: json={status} text={text_status}")
