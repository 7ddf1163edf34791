# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Dict, Optional

from typing_extensions import override

from opentelemetry.context import Context
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor


class DefaultAttributesSpanProcessor(SpanProcessor):
    """Sets a fixed set of attributes on every span when it starts.

    Attributes already set on the span by the time it reaches this processor are left untouched.
    """

    _default_attributes: Dict[str, str]

    def __init__(self, default_attributes: Dict[str, str]):
        self._default_attributes = dict(default_attributes)

    @override
    def on_start(self, span: Span, parent_context: Optional[Context] = None) -> None:
        for key, value in self._default_attributes.items():
            if span.attributes.get(key) is None:
                span.set_attribute(key, value)

    # pylint: disable=no-self-use
    @override
    def on_end(self, span: ReadableSpan) -> None:
        return

    @override
    def shutdown(self) -> None:
        self.force_flush()

    # pylint: disable=no-self-use
    @override
    def force_flush(self, timeout_millis: int = None) -> bool:
        return True
