"""mTLS echo client: sends lines to the echo server and prints the replies."""

import socket
import ssl
import sys
import traceback
from typing import Optional

from certinspect.common.config import InspectConfig
from certinspect.common.errors import LoadError
from certinspect.extensions.reporter import inspect_common_extensions
from certinspect.extensions.view import X509CertificateView
from certinspect.keystore.loader import load_keystore_file
from certinspect.tls import build_client_context


HELLO_WORLD = "Hello World from Python Client!"


class EchoClient:
    """Line-oriented client over a mutually authenticated TLS connection."""

    def __init__(
        self,
        context: ssl.SSLContext,
        host: str = "localhost",
        port: int = 8443,
        single_use: bool = False,
    ):
        self.context = context
        self.host = host
        self.port = port
        self.single_use = single_use
        self._sock: Optional[ssl.SSLSocket] = None
        self._reader = None
        self._writer = None

    @classmethod
    def from_config(cls, config: InspectConfig, single_use: bool = False) -> "EchoClient":
        """
        Load the client keystore and truststore and inspect the client certificate.

        Raises:
            LoadError: If a keystore cannot be loaded
        """
        keystore = load_keystore_file(config.client_keystore, config.password)
        print("[OK] Client keystore loaded successfully (CA-signed certificate)")
        truststore = load_keystore_file(config.truststore, config.password)
        print("[OK] Client truststore loaded successfully (contains CA certificate)")

        if single_use:
            print("Single-use mode: Client certificate should have serverAuth EKU")
        cert = keystore.certificate("client")
        view = X509CertificateView(cert) if cert is not None else None
        for line in inspect_common_extensions(view):
            print(line)

        return cls(
            build_client_context(keystore, truststore),
            host=config.host,
            port=config.port,
            single_use=single_use,
        )

    @property
    def connected(self) -> bool:
        return self._sock is not None and self._writer is not None

    def connect(self):
        """Connect and complete the TLS handshake."""
        raw = socket.create_connection((self.host, self.port))
        try:
            self._sock = self.context.wrap_socket(raw, server_hostname=self.host)
        except (ssl.SSLError, OSError):
            raw.close()
            raise
        print("Handshake successful!")
        print(f"Using cipher suite: {self._sock.cipher()[0]}")
        self._reader = self._sock.makefile("r", encoding="utf-8", newline="\n")
        self._writer = self._sock.makefile("w", encoding="utf-8", newline="\n")

    def send_message(self, message: str) -> Optional[str]:
        """
        Send one line and wait for the server's reply.

        Returns:
            Reply line, or None if not connected or the server closed the connection
        """
        if not self.connected:
            print("ERROR: Socket is not connected. Call connect() first.")
            return None

        print(f"Sending message: {message}")
        try:
            self._writer.write(message + "\n")
            self._writer.flush()
            response = self._reader.readline()
        except OSError as e:
            print(f"ERROR: Error sending message: {e}")
            return None

        if not response:
            return None
        response = response.rstrip("\r\n")
        print(f"Server response: {response}")
        return response

    def send_hello_world(self) -> Optional[str]:
        return self.send_message(HELLO_WORLD)

    def close(self):
        """Close the streams and the socket."""
        for stream in (self._writer, self._reader):
            if stream is not None:
                try:
                    stream.close()
                except OSError as e:
                    print(f"ERROR: Error closing connection: {e}")
        self._writer = self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            print("Connection closed.")


def main():
    config = InspectConfig.from_env()
    single_use = "-single-use" in sys.argv[1:]
    try:
        client = EchoClient.from_config(config, single_use=single_use)
        client.connect()
    except (LoadError, OSError) as e:
        print(f"ERROR: Failed to connect to server: {e}")
        traceback.print_exc()
        sys.exit(1)

    try:
        print("Type messages (or 'quit' to exit):")
        while True:
            try:
                line = input("You: ").strip()
            except (EOFError, KeyboardInterrupt):
                line = "quit"
            if not line:
                continue
            reply = client.send_message(line)
            if reply is None or line.lower() in ("quit", "exit"):
                break
    finally:
        client.close()


if __name__ == "__main__":
    main()
