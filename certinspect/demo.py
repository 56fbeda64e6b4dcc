"""Start the mTLS echo server in a background thread and talk to it with a client."""

import argparse
import sys
import threading
import time
import traceback

from certinspect.client import EchoClient
from certinspect.common.config import InspectConfig
from certinspect.common.errors import LoadError
from certinspect.server import EchoServer


SERVER_STARTUP_DELAY = 2.0  # seconds

DEMO_MESSAGES = (
    "This is a test message from the client!",
    "Testing mTLS communication...",
    "quit",
)


def run_demo(config: InspectConfig, single_use: bool = False, startup_delay: float = SERVER_STARTUP_DELAY) -> int:
    """
    Run server and client against each other.

    Returns:
        Process exit code
    """
    print("Starting mTLS Server Application...")
    if single_use:
        print("Single-use mode enabled - using serverAuth EKU in client certificate")

    try:
        server = EchoServer.from_config(config, host="127.0.0.1")
        server.bind()
    except (LoadError, OSError) as e:
        print(f"ERROR: Failed to start server: {e}")
        traceback.print_exc()
        return 1

    # Daemon thread so the process can exit while the server still waits
    thread = threading.Thread(target=server.serve_forever, name="mTLS-Server", daemon=True)
    thread.start()
    print("Server thread started.")
    time.sleep(startup_delay)

    print("\nStarting client communication...")
    config.port = server.port
    try:
        client = EchoClient.from_config(config, single_use=single_use)
        client.connect()
    except (LoadError, OSError) as e:
        print(f"ERROR: Client failed: {e}")
        traceback.print_exc()
        server.close()
        return 1

    try:
        client.send_hello_world()
        for message in DEMO_MESSAGES:
            client.send_message(message)
    finally:
        client.close()

    print("\nClient communication completed.")
    server.close()
    return 0


def main():
    parser = argparse.ArgumentParser(description="mTLS echo demo")
    parser.add_argument(
        "-single-use",
        dest="single_use",
        action="store_true",
        help="Expect serverAuth EKU in the client certificate"
    )
    args = parser.parse_args()
    sys.exit(run_demo(InspectConfig.from_env(), single_use=args.single_use))


if __name__ == "__main__":
    main()
