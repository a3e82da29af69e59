# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, TypeAdapter

from fetchkit.exceptions import EncodeError
from fetchkit.models import RawRequest
from fetchkit.query import encode_query_items

logger = logging.getLogger(__name__)

Serializer = Callable[[Any], bytes]

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def default_serializer(value: Any) -> bytes:
    if isinstance(value, BaseModel):
        return value.model_dump_json().encode()
    return TypeAdapter(type(value)).dump_json(value)


class BodyEncoder:
    """
    Sets the outgoing payload of a request.

    An encoder only holds the transformation, so one instance can be shared by
    any number of tasks. The ``Content-Type`` header is only filled in when the
    request does not carry one already.
    """

    def __init__(self, adapter: Callable[[RawRequest], RawRequest]):
        self._adapter = adapter

    def adapt(self, request: RawRequest) -> RawRequest:
        try:
            return self._adapter(request)
        except EncodeError:
            raise
        except Exception as err:
            raise EncodeError(f"Could not encode request body: {err}", err) from err

    @classmethod
    def data(cls, data: bytes) -> "BodyEncoder":
        return cls(lambda request: request.with_payload(data))

    @classmethod
    def text(cls, text: str, encoding: str = "utf-8") -> "BodyEncoder":

        def adapter(request: RawRequest) -> RawRequest:
            return request.with_payload(text.encode(encoding))

        return cls(adapter)

    @classmethod
    def json(cls, value: Any, serializer: Optional[Serializer] = None) -> "BodyEncoder":
        """Serialize a typed value (pydantic model, dataclass, ...) as JSON"""
        serialize = serializer or default_serializer

        def adapter(request: RawRequest) -> RawRequest:
            payload = serialize(value)
            return request.with_payload(payload).with_default_header(
                "Content-Type", JSON_CONTENT_TYPE
            )

        return cls(adapter)

    @classmethod
    def json_object(cls, value: Mapping[str, Any]) -> "BodyEncoder":

        def adapter(request: RawRequest) -> RawRequest:
            payload = json.dumps(value).encode()
            return request.with_payload(payload).with_default_header(
                "Content-Type", JSON_CONTENT_TYPE
            )

        return cls(adapter)

    @classmethod
    def url_encoded(
        cls, values: Mapping[str, Optional[str]], encoding: str = "utf-8"
    ) -> "BodyEncoder":

        def adapter(request: RawRequest) -> RawRequest:
            # "+" would be read back as a space by most servers
            query = encode_query_items(values.items()).replace("+", "%2B")
            try:
                payload = query.encode(encoding)
            except UnicodeError:
                logger.debug(
                    "Form body is not representable in %s, leaving request untouched",
                    encoding,
                )
                return request

            return request.with_payload(payload).with_default_header(
                "Content-Type", FORM_CONTENT_TYPE
            )

        return cls(adapter)

    @classmethod
    def url_encoded_model(
        cls,
        value: Any,
        encoding: str = "utf-8",
        serializer: Optional[Serializer] = None,
    ) -> "BodyEncoder":
        """
        Form encode a typed value.

        The value is serialized to JSON first. Unless that yields an object whose
        values are all strings or nulls, the request is left untouched.
        """
        serialize = serializer or default_serializer

        def adapter(request: RawRequest) -> RawRequest:
            intermediate = json.loads(serialize(value))

            if not isinstance(intermediate, dict) or not all(
                item is None or isinstance(item, str) for item in intermediate.values()
            ):
                return request

            return cls.url_encoded(intermediate, encoding).adapt(request)

        return cls(adapter)


__all__ = [
    "BodyEncoder",
    "Serializer",
    "default_serializer",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
]
