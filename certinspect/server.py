"""mTLS echo server: line-oriented echo over a mutually authenticated TLS socket."""

import socket
import ssl
import sys
import traceback
from typing import Optional, Tuple

from certinspect.common.config import InspectConfig
from certinspect.common.errors import LoadError
from certinspect.extensions.reporter import inspect_common_extensions
from certinspect.extensions.view import X509CertificateView
from certinspect.keystore.loader import load_keystore_file
from certinspect.tls import build_server_context


QUIT_COMMANDS = ("quit", "exit")
GOODBYE = "Goodbye!"


def respond(line: str) -> Tuple[str, bool]:
    """
    Compute the reply to one received line.

    Returns:
        Tuple of (reply, close_connection)
    """
    if line.lower() in QUIT_COMMANDS:
        return GOODBYE, True
    return f"Echo: {line}", False


def handle_connection(conn: socket.socket, addr: tuple):
    """Echo lines back until the peer quits or disconnects."""
    try:
        with conn.makefile("r", encoding="utf-8", newline="\n") as reader, \
                conn.makefile("w", encoding="utf-8", newline="\n") as writer:
            for raw in reader:
                line = raw.rstrip("\r\n")
                print(f"Received: {line}")
                reply, done = respond(line)
                if done:
                    print("Client requested to close connection")
                writer.write(reply + "\n")
                writer.flush()
                if done:
                    break
    except OSError as e:
        print(f"ERROR: Error handling client connection: {e}")
    finally:
        try:
            conn.close()
        except OSError as e:
            print(f"ERROR: Error closing socket: {e}")


class EchoServer:
    """Accepts one mTLS client at a time and echoes its lines."""

    def __init__(self, context: ssl.SSLContext, host: str = "0.0.0.0", port: int = 8443):
        self.context = context
        self.host = host
        self.port = port
        self._sock: Optional[socket.socket] = None

    @classmethod
    def from_config(cls, config: InspectConfig, host: str = "0.0.0.0") -> "EchoServer":
        """
        Load the server keystore and truststore and inspect the server certificate.

        Raises:
            LoadError: If a keystore cannot be loaded
        """
        keystore = load_keystore_file(config.server_keystore, config.password)
        print("[OK] Server keystore loaded successfully (CA-signed certificate)")
        truststore = load_keystore_file(config.truststore, config.password)
        print("[OK] Server truststore loaded successfully (contains CA certificate)")

        print("Available aliases in keystore:")
        for alias in keystore.aliases():
            print(f"  - {alias}")

        cert = keystore.certificate("server")
        if cert is not None:
            for line in inspect_common_extensions(X509CertificateView(cert)):
                print(line)
        else:
            print("WARNING: Certificate with alias 'server' not found in keystore")

        return cls(build_server_context(keystore, truststore), host=host, port=config.port)

    def bind(self) -> int:
        """Open the listening socket; returns the bound port."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.port))
        sock.listen(5)
        self._sock = self.context.wrap_socket(sock, server_side=True)
        self.port = self._sock.getsockname()[1]
        return self.port

    def serve_once(self) -> bool:
        """
        Accept and serve a single connection.

        Returns:
            False if the handshake failed, True otherwise
        """
        sock = self._sock
        if sock is None:
            return False
        print("Server is waiting for connection...")
        try:
            conn, addr = sock.accept()
        except OSError as e:
            # SSLError (failed handshake) is an OSError subclass
            print(f"ERROR: Failed to accept connection: {e}")
            return False
        print(f"Client connected: {addr[0]}")
        handle_connection(conn, addr)
        return True

    def serve_forever(self):
        if self._sock is None:
            self.bind()
        while self._sock is not None:
            self.serve_once()

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None


def main():
    config = InspectConfig.from_env()
    try:
        server = EchoServer.from_config(config)
        server.bind()
        print(f"[OK] Server listening on {server.host}:{server.port}")
    except (LoadError, OSError, ssl.SSLError) as e:
        print(f"ERROR: Failed to start server: {e}")
        traceback.print_exc()
        sys.exit(1)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down server...")
    finally:
        server.close()


if __name__ == "__main__":
    main()
