# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Value synthesis, malformation catalogue and request building."""

from .malformations import (
    EXPECTATIONS,
    INVALID_JSON_BODY,
    UNKNOWN_FIELD_NAME,
    MalformationExpectation,
    expectation_for,
    select_malformations,
    should_probe_malformations,
)
from .requests import RequestBuilder, parameter_value
from .values import FORMAT_VALUES, synthesize

__all__ = [
    "EXPECTATIONS",
    "FORMAT_VALUES",
    "INVALID_JSON_BODY",
    "MalformationExpectation",
    "RequestBuilder",
    "UNKNOWN_FIELD_NAME",
    "expectation_for",
    "parameter_value",
    "select_malformations",
    "should_probe_malformations",
    "synthesize",
]
