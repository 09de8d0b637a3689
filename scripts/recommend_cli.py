#!/usr/bin/env python3
# PURPOSE: Command-line interface to run the Navigator over a request file.
# CONTEXT: Lets you try recommendations locally without deploying the Lambda.
# CREDITS: Original work – no reused or adapted external code.

import argparse
import json
import sys

from navigator.lambda_handler import handler


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pendle Yield Navigator CLI")
    parser.add_argument("request", help="path to a RecommendRequest JSON file ('-' for stdin)")
    parser.add_argument("--risk-level", help="override the request's risk_level")
    parser.add_argument("--markets", help="path to a JSON file of raw markets (skips the live feed)")
    parser.add_argument("--session-id", help="attach the run to a session trace")
    args = parser.parse_args(argv)

    # Read the request body; '-' means stdin so the CLI composes with other tools.
    if args.request == "-":
        payload = json.load(sys.stdin)
    else:
        with open(args.request, encoding="utf-8") as f:
            payload = json.load(f)

    if args.risk_level:
        payload["risk_level"] = args.risk_level
    if args.markets:
        with open(args.markets, encoding="utf-8") as f:
            data = json.load(f)
        payload["markets"] = data.get("markets", []) if isinstance(data, dict) else data
    if args.session_id:
        payload["session_id"] = args.session_id

    # Go through the handler so the CLI sees the same status codes as the API.
    resp = handler({"body": payload})
    print(json.dumps(json.loads(resp["body"]), indent=2))
    return 0 if resp["statusCode"] == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
