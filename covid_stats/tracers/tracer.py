#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Union, Dict

# 3rd party:
from opencensus.ext.azure.log_exporter import AzureLogHandler
from opencensus.ext.azure.trace_exporter import AzureExporter
from opencensus.trace import config_integration
from opencensus.trace.samplers import AlwaysOnSampler, AlwaysOffSampler
from opencensus.trace.span import SpanKind
from opencensus.trace.tracer import Tracer

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'add_azure_handler',
    'trace_run'
]


config_integration.trace_integrations(['logging'])
config_integration.trace_integrations(['requests'])


def add_azure_handler(instrumentation_key: str, cloud_role_name: Callable,
                      logging_instances: Iterable[Iterable[Union[logging.Logger, int]]]):
    handler = AzureLogHandler(connection_string=instrumentation_key)
    handler.add_telemetry_processor(cloud_role_name)

    for log, level in logging_instances:
        log.addHandler(handler)
        log.setLevel(level)

    return handler


@contextmanager
def trace_run(name: str, instrumentation_key: str, cloud_role_name: Callable,
              extra_attrs: Dict[str, str], export: bool = True):
    """
    Runs the enclosed block inside a root span. Dependency spans
    created by ``trace_method_operation`` are nested under it.
    Spans are only exported to Azure Monitor when ``export`` is set.
    """
    if export:
        exporter = AzureExporter(connection_string=instrumentation_key)
        exporter.add_telemetry_processor(cloud_role_name)
        tracer = Tracer(exporter=exporter, sampler=AlwaysOnSampler())
    else:
        tracer = Tracer(sampler=AlwaysOffSampler())

    with tracer.span(name) as span:
        span.span_kind = SpanKind.SERVER

        for key, value in extra_attrs.items():
            tracer.add_attribute_to_current_span(key, value)

        yield tracer
