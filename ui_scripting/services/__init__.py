"""Service layer that ties scripts, runs, reports and recording together."""

from .test_scripts import SessionContext, TestScriptService
