# automatic_trips/common/truststore_context.py
"""
OS trust store support for AutomaticClient.

With ApiCredentials.use_truststore=True the client verifies
api.automatic.com against the operating system's certificate store rather
than httpx's bundled CAs. That is what makes the client work behind a
TLS-inspecting proxy whose root certificate is only installed system-wide.

truststore is an optional extra (`pip install automatic-trips[truststore]`)
and is only imported when such a client is built.
"""

import ssl

__all__: list[str] = ['build_truststore_ssl_context']


def build_truststore_ssl_context() -> ssl.SSLContext:
    """
    SSLContext for httpx's `verify` argument, backed by the OS trust store.

    Raises:
        RuntimeError: If the truststore extra is not installed.
    """
    try:
        import truststore  # noqa: PLC0415
    except ImportError as import_error:
        raise RuntimeError(
            'use_truststore=True needs the truststore package; '
            'install automatic-trips[truststore]'
        ) from import_error

    return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
