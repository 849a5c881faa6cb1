"""
HTTP Client Example

Connects to a web server, sends ``GET / HTTP/1.0`` and prints the parsed
response once the server closes the connection. Every connector and session
event is printed as it happens.

Run:
  python examples/http_client.py [host] [port]

Environment:
  TCPSESSION_LOG_LEVEL=DEBUG   show state transitions and byte counts
"""

from __future__ import annotations

import sys

import anyio

from tcpsession import ClientConfig, Connector, HttpRequest, HttpResponse, HttpVersion, Session


async def main(host: str, port: int) -> None:
    config = ClientConfig.from_env()
    config.configure_logging()

    request = HttpRequest("GET", "/", HttpVersion.HTTP_1_0)
    request.set_header("Host", host)
    request.set_header("Accept", "*/*")
    request.set_header("Connection", "close")

    response = HttpResponse()
    done = anyio.Event()

    def on_connect(session: Session) -> None:
        print("Connected")

        def on_read(data: bytes) -> None:
            print(f"{len(data)} bytes read")
            response.append(data)
            session.read()

        def on_read_complete() -> None:
            print("Read complete")
            print(f"HTTP version: {response.http_version.value}")
            print(f"Status code: {response.status_code}")
            print(f"Reason: {response.reason}")
            print("Header fields:")
            for name, value in response.get_headers():
                print(f">> {name}: {value}")
            print()
            print("Body:")
            print(response.body.to_text())
            session.close()

        def on_write(bytes_transferred: int) -> None:
            print(f"{bytes_transferred} bytes written")
            session.read()

        def on_session_error(message: str, bytes_transferred: int) -> None:
            print(f"Error: {message}")
            session.close()

        def on_close() -> None:
            print("Disconnected")
            done.set()

        session.on_read(on_read)
        session.on_read_complete(on_read_complete)
        session.on_write(on_write)
        session.on_error(on_session_error)
        session.on_close(on_close)
        session.write(request.to_bytes())

    def on_error(message: str, bytes_transferred: int) -> None:
        print(f"Error: {message}" if message else "Error")
        done.set()

    async with anyio.create_task_group() as tg:
        connector = Connector(tg, config=config)
        connector.on_resolve(lambda: print("Endpoint resolved"))
        connector.on_connect(on_connect)
        connector.on_error(on_error)

        print(f"Connecting to: {host}:{port}")
        connector.connect(host, port)
        await done.wait()
        tg.cancel_scope.cancel()


if __name__ == "__main__":
    host = sys.argv[1] if len(sys.argv) > 1 else "example.org"
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 80
    anyio.run(main, host, port)
