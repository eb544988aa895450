# mock_collector.py
from flask import Flask, request, jsonify
import os

app = Flask(__name__)

# everything received so far, newest last
events = []

@app.route('/v1/<kind>', methods=['POST'])
def collect(kind):
    if kind not in ("log", "trace", "close"):
        return jsonify({"error": f"unknown event kind {kind}"}), 404

    payload = request.get_json(silent=True) or {}
    events.append({"kind": kind, "payload": payload})

    if kind == "log":
        print(f"[{kind}] {payload.get('value', '')}")
    else:
        print(f"[{kind}] {payload.get('traceId', '')}/{payload.get('parentSpanId', '')} "
              f"{payload.get('operation', '')}: {payload.get('message', '')}")

    return jsonify({"received": kind})

@app.route('/v1/events', methods=['GET'])
def list_events():
    return jsonify(events)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("COLLECTOR_PORT", 9090)))
