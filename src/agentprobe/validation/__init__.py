# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response validation: schema conformance and error-response quality."""

from .error_quality import evaluate_error_response
from .schema import to_json_schema, validate_schema

__all__ = ["evaluate_error_response", "to_json_schema", "validate_schema"]
