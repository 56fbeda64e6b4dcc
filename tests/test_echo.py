"""Tests for the mTLS echo server and client."""

import socket
import ssl
import threading

import pytest

from certinspect.client import EchoClient
from certinspect.common.config import InspectConfig
from certinspect.common.errors import LoadError
from certinspect.keystore.loader import Keystore, load_keystore, load_keystore_file
from certinspect.server import GOODBYE, EchoServer, handle_connection, respond
from certinspect.tls import build_client_context, build_server_context


PASSWORD = "changeit"


@pytest.mark.parametrize("line, expected", [
    ("hello", ("Echo: hello", False)),
    ("", ("Echo: ", False)),
    ("quit", (GOODBYE, True)),
    ("EXIT", (GOODBYE, True)),
])
def test_respond(line, expected):
    assert respond(line) == expected


def test_handle_connection_over_socketpair():
    server_side, client_side = socket.socketpair()
    worker = threading.Thread(target=handle_connection, args=(server_side, ("local", 0)))
    worker.start()
    with client_side.makefile("rw", encoding="utf-8", newline="\n") as stream:
        stream.write("ping\n")
        stream.flush()
        assert stream.readline() == "Echo: ping\n"
        stream.write("quit\n")
        stream.flush()
        assert stream.readline() == GOODBYE + "\n"
        assert stream.readline() == ""
    client_side.close()
    worker.join(timeout=5)
    assert not worker.is_alive()


def test_truststore_without_key_is_rejected_as_identity(keystore_dir):
    truststore = load_keystore_file(keystore_dir / "truststore.p12", PASSWORD)
    with pytest.raises(LoadError, match="no private key"):
        build_server_context(truststore, truststore)


def test_empty_truststore_is_rejected(server_p12):
    keystore = load_keystore(server_p12, PASSWORD)
    with pytest.raises(LoadError, match="no certificates"):
        build_server_context(keystore, Keystore({}))


def test_mutual_tls_round_trip(keystore_dir, capsys):
    config = InspectConfig(keystore_dir=keystore_dir, password=PASSWORD, host="127.0.0.1", port=0)
    server = EchoServer.from_config(config, host="127.0.0.1")
    port = server.bind()
    worker = threading.Thread(target=server.serve_once)
    worker.start()

    config.port = port
    client = EchoClient.from_config(config)
    try:
        client.connect()
        assert client.connected
        assert client.send_message("hi") == "Echo: hi"
        assert client.send_hello_world() == "Echo: Hello World from Python Client!"
        assert client.send_message("quit") == GOODBYE
    finally:
        client.close()
        worker.join(timeout=10)
        server.close()

    assert not client.connected
    out = capsys.readouterr().out
    assert "Handshake successful!" in out
    assert "Received: hi" in out
    assert "Client requested to close connection" in out
    assert "  - server" in out


def test_client_without_certificate_is_refused(keystore_dir):
    server_store = load_keystore_file(keystore_dir / "server.p12", PASSWORD)
    trust = load_keystore_file(keystore_dir / "truststore.p12", PASSWORD)
    server = EchoServer(build_server_context(server_store, trust), "127.0.0.1", 0)
    port = server.bind()
    results = []
    worker = threading.Thread(target=lambda: results.append(server.serve_once()))
    worker.start()

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    client = EchoClient(context, "127.0.0.1", port)
    try:
        client.connect()
        # TLS 1.3 reports the missing client certificate on first read
        assert client.send_message("hi") is None
    except (ssl.SSLError, OSError):
        pass
    finally:
        client.close()
        worker.join(timeout=10)
        server.close()
    assert results == [False]


def test_send_before_connect(keystore_dir, capsys):
    keystore = load_keystore_file(keystore_dir / "client.p12", PASSWORD)
    trust = load_keystore_file(keystore_dir / "truststore.p12", PASSWORD)
    client = EchoClient(build_client_context(keystore, trust), "127.0.0.1", 1)
    assert client.send_message("hi") is None
    assert "not connected" in capsys.readouterr().out
