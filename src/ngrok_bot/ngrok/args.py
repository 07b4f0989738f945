"""Command line arguments for the ngrok binary."""

HTTP_CONNECTION = "http"


def build_args(connection_type: str, port: int, domain: str | None = None) -> list[str]:
    """Build ngrok arguments for one tunnel.

    The connection type always comes first and the port last. A custom
    domain is only valid for http tunnels and is dropped for other types.

    Args:
        connection_type: Tunnel type (http, tcp, tls)
        port: Local port to expose
        domain: Optional custom domain

    Returns:
        Argument list without the binary itself
    """
    args = [connection_type]

    if domain and connection_type == HTTP_CONNECTION:
        args.extend(["--domain", domain])

    args.append(str(port))
    return args
