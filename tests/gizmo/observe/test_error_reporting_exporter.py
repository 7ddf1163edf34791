# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from unittest import TestCase
from unittest.mock import MagicMock, call

from gizmo.observe.error_reporting_exporter import (
    ErrorReportingMetricExporter,
    ErrorReportingSpanExporter,
    ExportError,
)
from opentelemetry.sdk.metrics.export import AggregationTemporality, MetricExporter, MetricExportResult
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult


# pylint: disable=no-self-use
class TestErrorReportingSpanExporter(TestCase):
    def setUp(self):
        self.delegate_mock: SpanExporter = MagicMock()
        self.on_error = MagicMock()
        self.exporter = ErrorReportingSpanExporter(self.delegate_mock, self.on_error)

    def test_pass_through_delegations(self):
        self.exporter.force_flush()
        self.exporter.shutdown()
        self.delegate_mock.assert_has_calls([call.force_flush(30000), call.shutdown()])

    def test_successful_export_is_not_reported(self):
        spans = [MagicMock()]
        self.delegate_mock.export.return_value = SpanExportResult.SUCCESS

        self.assertEqual(self.exporter.export(spans), SpanExportResult.SUCCESS)
        self.delegate_mock.export.assert_called_once_with(spans)
        self.on_error.assert_not_called()

    def test_failure_result_is_reported(self):
        self.delegate_mock.export.return_value = SpanExportResult.FAILURE

        self.assertEqual(self.exporter.export([MagicMock(), MagicMock()]), SpanExportResult.FAILURE)
        self.on_error.assert_called_once()
        reported = self.on_error.call_args[0][0]
        self.assertIsInstance(reported, ExportError)
        self.assertIn("2 span(s)", str(reported))

    def test_exception_is_reported_and_contained(self):
        error = RuntimeError("permission denied")
        self.delegate_mock.export.side_effect = error

        self.assertEqual(self.exporter.export([MagicMock()]), SpanExportResult.FAILURE)
        self.on_error.assert_called_once_with(error)

    def test_raising_callback_is_contained(self):
        self.delegate_mock.export.side_effect = RuntimeError("permission denied")
        self.on_error.side_effect = ValueError("callback bug")

        self.assertEqual(self.exporter.export([MagicMock()]), SpanExportResult.FAILURE)

    def test_failures_are_logged_without_callback(self):
        exporter = ErrorReportingSpanExporter(self.delegate_mock)
        self.delegate_mock.export.return_value = SpanExportResult.FAILURE

        with self.assertLogs("gizmo.observe.error_reporting_exporter", level="ERROR"):
            self.assertEqual(exporter.export([MagicMock()]), SpanExportResult.FAILURE)


class TestErrorReportingMetricExporter(TestCase):
    def setUp(self):
        self.delegate_mock: MetricExporter = MagicMock(spec=MetricExporter)
        self.on_error = MagicMock()
        self.exporter = ErrorReportingMetricExporter(self.delegate_mock, self.on_error)

    def test_pass_through_delegations(self):
        self.exporter.force_flush(timeout_millis=5000)
        self.exporter.shutdown(timeout_millis=1000)
        self.delegate_mock.assert_has_calls([call.force_flush(timeout_millis=5000), call.shutdown(timeout_millis=1000)])

    def test_keeps_delegate_preferences(self):
        delegate = MagicMock()
        delegate._preferred_temporality = {object: AggregationTemporality.CUMULATIVE}
        delegate._preferred_aggregation = None

        exporter = ErrorReportingMetricExporter(delegate)

        # pylint: disable=protected-access
        self.assertEqual(exporter._preferred_temporality, {object: AggregationTemporality.CUMULATIVE})
        self.assertIsNone(exporter._preferred_aggregation)

    def test_successful_export_is_not_reported(self):
        metrics_data = MagicMock()
        self.delegate_mock.export.return_value = MetricExportResult.SUCCESS

        self.assertEqual(self.exporter.export(metrics_data, timeout_millis=100), MetricExportResult.SUCCESS)
        self.delegate_mock.export.assert_called_once_with(metrics_data, timeout_millis=100)
        self.on_error.assert_not_called()

    def test_failure_result_is_reported(self):
        self.delegate_mock.export.return_value = MetricExportResult.FAILURE

        self.assertEqual(self.exporter.export(MagicMock()), MetricExportResult.FAILURE)
        self.assertIsInstance(self.on_error.call_args[0][0], ExportError)

    def test_exception_is_reported_and_contained(self):
        error = RuntimeError("quota exceeded")
        self.delegate_mock.export.side_effect = error

        self.assertEqual(self.exporter.export(MagicMock()), MetricExportResult.FAILURE)
        self.on_error.assert_called_once_with(error)
