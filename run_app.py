#!/usr/bin/env python
"""Run the NichePulse API server."""

import os
import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main():
    import argparse

    # Hosted platforms provide PORT
    default_port = int(os.getenv("PORT", 8000))
    is_production = bool(os.getenv("PORT"))
    default_host = "0.0.0.0" if is_production else "127.0.0.1"

    parser = argparse.ArgumentParser(description="NichePulse API")
    parser.add_argument("--host", default=default_host, help="Host")
    parser.add_argument("--port", type=int, default=default_port, help="Port")
    parser.add_argument("--reload", action="store_true", help="Auto-reload")

    args = parser.parse_args()

    print(f"""
╔═══════════════════════════════════════════════════════════════╗
║                                                               ║
║   📈  NichePulse - Trending Formats API                       ║
║                                                               ║
║   API:     http://{args.host}:{args.port}/api/formats/trending
║   Docs:    http://{args.host}:{args.port}/docs
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "nichepulse.app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload and not is_production,
    )


if __name__ == "__main__":
    main()
