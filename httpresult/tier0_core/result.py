"""
httpresult.tier0_core.result
─────────────────────────────
The Result builder: a status code, a header set and a deferred body writer
describing everything that should be sent to the client.

A Result is an Exception, so a handler may either return it or raise it::

    def get_user(writer, request):
        user = users.get(request["PATH_INFO"])
        if user is None:
            raise new_result(HTTP.NOT_FOUND).with_text_body("no such user")
        return new_result(HTTP.OK).with_json_body(user)

Nothing is written until the Resolver consumes the Result.
"""
from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import closing
from typing import IO, Any, Mapping, Protocol, runtime_checkable

from pydantic_core import to_json

from httpresult.tier0_core.config import get_settings
from httpresult.tier0_core.http import HTTP


# ── Body writers ──────────────────────────────────────────────────────────────

@runtime_checkable
class Sink(Protocol):
    """Anything bytes can be written into: a response writer, a BytesIO."""

    def write(self, data: bytes) -> Any: ...


@runtime_checkable
class BodyWriter(Protocol):
    """
    A response body. ``chunks()`` yields the bytes lazily for hosts that pull
    the body; ``write_to()`` pushes the same bytes into a sink. Failure is
    signalled by raising.
    """

    def chunks(self) -> Iterator[bytes]: ...

    def write_to(self, sink: Sink) -> None: ...


class Body:
    """Base body writer: subclasses implement chunks()."""

    def chunks(self) -> Iterator[bytes]:
        raise NotImplementedError

    def write_to(self, sink: Sink) -> None:
        with closing(self.chunks()) as chunks:
            for chunk in chunks:
                sink.write(chunk)


class JSONBody(Body):
    """
    Serializes a value as JSON at write time, not at construction time.
    Pydantic models, dataclasses, datetimes, UUIDs and Decimals are handled
    at any depth; anything else raises PydanticSerializationError.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def chunks(self) -> Iterator[bytes]:
        yield to_json(self.value) + b"\n"


class TextBody(Body):
    def __init__(self, text: str) -> None:
        self.text = text

    def chunks(self) -> Iterator[bytes]:
        yield self.text.encode("utf-8")


class ReaderBody(Body):
    """Streams a binary reader chunk by chunk. Leaves it open."""

    def __init__(self, reader: IO[bytes], chunk_size: int | None = None) -> None:
        self.reader = reader
        self.chunk_size = chunk_size

    def chunks(self) -> Iterator[bytes]:
        chunk_size = self.chunk_size or get_settings().read_chunk_size
        while True:
            chunk = self.reader.read(chunk_size)
            if not chunk:
                return
            yield chunk


class ClosingReaderBody(ReaderBody):
    """Like ReaderBody, but closes the reader once streaming ends or is abandoned."""

    def chunks(self) -> Iterator[bytes]:
        try:
            yield from super().chunks()
        finally:
            self.reader.close()


# ── Result ────────────────────────────────────────────────────────────────────

class Result(Exception):
    """
    A fully specified HTTP outcome. Build it with new_result() and the
    chainable with_* methods; each returns the same Result.
    """

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status
        self.headers: dict[str, str] = {}
        self.body: BodyWriter | None = None

    def with_json_body(self, value: Any) -> Result:
        self.headers["Content-Type"] = "application/json"
        self.body = JSONBody(value)
        return self

    def with_text_body(self, text: str) -> Result:
        self.body = TextBody(text)
        return self

    def with_reader_body(self, reader: IO[bytes]) -> Result:
        self.body = ReaderBody(reader)
        return self

    def with_closing_reader_body(self, reader: IO[bytes]) -> Result:
        self.body = ClosingReaderBody(reader)
        return self

    def with_headers(self, headers: Mapping[str, str]) -> Result:
        """
        Merge ``headers`` into the Result's headers. Can be chained; later
        calls win on key collisions and earlier keys are never cleared.
        Headers already set on the writer by the handler are kept unless
        overridden here.
        """
        self.headers.update(headers)
        return self

    def render(self) -> bytes:
        """Render the body into memory. Empty when there is no body."""
        if self.body is None:
            return b""
        buf = io.BytesIO()
        self.body.write_to(buf)
        return buf.getvalue()

    def __str__(self) -> str:
        # Rendering a reader would drain it before the Resolver gets to it.
        if isinstance(self.body, ReaderBody):
            return f"{self.status} <streamed body>"
        try:
            return self.render().decode("utf-8", errors="replace")
        except Exception as exc:
            return f"rendering result body: {exc}"

    def __repr__(self) -> str:
        body = type(self.body).__name__ if self.body is not None else None
        return f"Result(status={self.status}, headers={self.headers!r}, body={body})"


def new_result(status: int) -> Result:
    """Return an empty Result with ``status`` set. The status is not validated."""
    return Result(status)


def no_content_result() -> Result:
    """An empty OK response."""
    return Result(HTTP.OK)


__all__ = [
    "Sink", "BodyWriter", "Body", "JSONBody", "TextBody", "ReaderBody",
    "ClosingReaderBody", "Result", "new_result", "no_content_result",
]
