"""Command-line entry point: ask a question locally or run the HTTP server."""

import argparse
import asyncio
import json
import logging
import sys

from lingua_bridge.tutor.gateway import IncomingRequest, handle_request


async def ask(message: str, origin: str = "http://localhost:8888") -> int:
    """Send one message through the gateway and print the JSON response."""
    request = IncomingRequest(
        method="POST",
        body=json.dumps({"message": message}),
        headers={"origin": origin},
    )
    response = await handle_request(request)
    print(
        json.dumps(
            {
                "statusCode": response.status_code,
                "headers": response.headers,
                "body": response.json(),
            },
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0 if response.status_code == 200 else 1


def serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("lingua_bridge.tutor.server.app:app", host=host, port=port)
    return 0


def cli():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="English tutor chat proxy")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask_parser = subparsers.add_parser("ask", help="Ask one question and print the response")
    ask_parser.add_argument("message", help="Question to send, in English")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP gateway")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.command == "ask":
        logging.basicConfig(level=logging.INFO)
        exit_code = asyncio.run(ask(args.message))
    else:
        exit_code = serve(args.host, args.port)
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
