#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from functools import wraps
from inspect import signature

# 3rd party:
from opencensus.trace.execution_context import get_opencensus_tracer
from opencensus.trace.span import SpanKind

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'trace_method_operation'
]


def trace_method_operation(*cls_attrs, dep_type="_name", name="_account_name", **attrs):
    """
    Records a method call as a dependency span on the current tracer.

    ``dep_type`` and ``name`` are attribute names looked up on the
    instance. ``cls_attrs`` are further instance attributes, and
    ``attrs`` static values, attached to the span. Arguments named
    ``offset`` or ``path`` are attached as well.
    """
    def wrapper(func):
        sig = signature(func)

        @wraps(func)
        def process(klass, *args, **kwargs):
            tracer = get_opencensus_tracer()

            if tracer is None:
                return func(klass, *args, **kwargs)

            bound_inputs = sig.bind(klass, *args, **kwargs)

            span = tracer.start_span()
            span.span_kind = SpanKind.CLIENT
            span.name = getattr(klass, name, None)

            if "operation" in attrs:
                span.name = f'{attrs["operation"]} {span.name}'

            dependency_type = getattr(klass, dep_type)
            span.add_attribute('dependency.type', dependency_type)

            for argument in ("offset", "path"):
                if argument in bound_inputs.arguments:
                    span.add_attribute(
                        f"{dependency_type}.{argument}",
                        bound_inputs.arguments[argument]
                    )

            for key in cls_attrs:
                span.add_attribute(f"{dependency_type}.{key}", getattr(klass, key, None))

            for key, value in attrs.items():
                span.add_attribute(f"{dependency_type}.{key}", value)

            success = True
            try:
                return func(klass, *args, **kwargs)
            except Exception as err:
                success = False
                raise err
            finally:
                span.add_attribute(f'{dependency_type}.success', success)
                tracer.end_span()

        return process

    return wrapper
