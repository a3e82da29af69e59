# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import TypeAdapter

from fetchkit.exceptions import DecodeError, EncodeError
from fetchkit.models import RawRequest, ResponseMetadata
from fetchkit.query import parse_query_items
from fetchkit.request_body import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE

T = TypeVar("T")

Decoder = Callable[[ResponseMetadata, bytes], T]
Deserializer = Callable[[bytes], T]
Adapter = Callable[[RawRequest], RawRequest]


def _identity(request: RawRequest) -> RawRequest:
    return request


def _accept(content_type: str) -> Adapter:

    def adapter(request: RawRequest) -> RawRequest:
        return request.with_default_header("Accept", content_type)

    return adapter


class ResponseDecoder(Generic[T]):
    """
    Interprets response bytes as ``T``.

    Besides decoding, a response decoder may adapt the outgoing request so
    the server returns a matching representation. The adapter never replaces
    an ``Accept`` header set by the caller.
    """

    def __init__(self, decoder: Decoder[T], adapter: Adapter = _identity):
        self._decoder = decoder
        self._adapter = adapter

    def adapt(self, request: RawRequest) -> RawRequest:
        try:
            return self._adapter(request)
        except EncodeError:
            raise
        except Exception as err:
            raise EncodeError(
                f"Could not prepare request for decoding: {err}", err
            ) from err

    def decode(self, response: ResponseMetadata, data: bytes) -> T:
        try:
            return self._decoder(response, data)
        except DecodeError:
            raise
        except Exception as err:
            raise DecodeError(f"Could not decode response body: {err}", err) from err

    @staticmethod
    def data() -> "ResponseDecoder[bytes]":
        return ResponseDecoder(lambda _, data: data)

    @staticmethod
    def text(encoding: str = "utf-8") -> "ResponseDecoder[str]":
        # Undecodable bytes fail with DecodeError instead of yielding ""
        return ResponseDecoder(lambda _, data: data.decode(encoding))

    @staticmethod
    def json(
        type_: type[T], deserializer: Optional[Deserializer[T]] = None
    ) -> "ResponseDecoder[T]":
        deserialize: Deserializer[T] = (
            deserializer or TypeAdapter(type_).validate_json
        )
        return ResponseDecoder(
            lambda _, data: deserialize(data), _accept(JSON_CONTENT_TYPE)
        )

    @staticmethod
    def json_object() -> "ResponseDecoder[dict[str, Any]]":

        def decoder(_: ResponseMetadata, data: bytes) -> dict[str, Any]:
            value = json.loads(data)
            return value if isinstance(value, dict) else {}

        return ResponseDecoder(decoder, _accept(JSON_CONTENT_TYPE))

    @staticmethod
    def url_encoded(
        encoding: str = "utf-8",
    ) -> "ResponseDecoder[dict[str, Optional[str]]]":
        text = ResponseDecoder.text(encoding)

        def decoder(
            response: ResponseMetadata, data: bytes
        ) -> dict[str, Optional[str]]:
            values: dict[str, Optional[str]] = {}
            for name, value in parse_query_items(text.decode(response, data)):
                values[name] = value
            return values

        return ResponseDecoder(decoder, _accept(FORM_CONTENT_TYPE))

    @staticmethod
    def url_encoded_model(
        type_: type[T],
        encoding: str = "utf-8",
        deserializer: Optional[Deserializer[T]] = None,
    ) -> "ResponseDecoder[T]":
        form = ResponseDecoder.url_encoded(encoding)
        typed = ResponseDecoder.json(type_, deserializer)

        def decoder(response: ResponseMetadata, data: bytes) -> T:
            values = form.decode(response, data)
            return typed.decode(response, json.dumps(values).encode())

        return ResponseDecoder(decoder, form.adapt)


__all__ = [
    "ResponseDecoder",
    "Decoder",
    "Deserializer",
]
