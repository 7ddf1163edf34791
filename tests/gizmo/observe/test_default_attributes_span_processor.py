# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from unittest import TestCase

from gizmo.observe.default_attributes_span_processor import DefaultAttributesSpanProcessor
from opentelemetry.sdk.trace import Tracer, TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


class TestDefaultAttributesSpanProcessor(TestCase):
    def setUp(self):
        self.span_exporter: InMemorySpanExporter = InMemorySpanExporter()
        self.tracer_provider: TracerProvider = TracerProvider()
        self.tracer_provider.add_span_processor(
            DefaultAttributesSpanProcessor({"service": "my-service", "version": "v1"})
        )
        self.tracer_provider.add_span_processor(SimpleSpanProcessor(self.span_exporter))
        self.tracer: Tracer = self.tracer_provider.get_tracer(__name__)

    def tearDown(self):
        self.tracer_provider.shutdown()

    def test_attributes_set_on_every_span(self):
        with self.tracer.start_as_current_span("parent"):
            with self.tracer.start_as_current_span("child"):
                pass

        spans = self.span_exporter.get_finished_spans()
        self.assertEqual(len(spans), 2)
        for span in spans:
            self.assertEqual(span.attributes.get("service"), "my-service")
            self.assertEqual(span.attributes.get("version"), "v1")

    def test_span_attributes_take_precedence(self):
        with self.tracer.start_as_current_span("span", attributes={"service": "explicit"}):
            pass

        span = self.span_exporter.get_finished_spans()[0]
        self.assertEqual(span.attributes.get("service"), "explicit")
        self.assertEqual(span.attributes.get("version"), "v1")

    def test_force_flush(self):
        processor = DefaultAttributesSpanProcessor({})
        self.assertTrue(processor.force_flush())
        processor.shutdown()
