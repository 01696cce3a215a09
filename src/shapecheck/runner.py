"""Batch runner for validating many documents against one schema.

Schemas hold no state between calls, so a single schema can be shared by
worker threads. Results are always reported in input order.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from shapecheck.result import Schema, ValidationIssue, ValidationResult, invalid

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Validation outcome for one named document.

    Attributes:
        name: Document name (usually the file path it was loaded from).
        result: Result returned by the schema.
    """

    name: str
    result: ValidationResult

    @property
    def is_valid(self) -> bool:
        return self.result.is_valid


@dataclass
class AggregatedResult:
    """Aggregated results from validating several documents.

    Attributes:
        status: "pass" if every document is valid, "fail" otherwise.
        documents_checked: Number of documents validated.
        total_issues: Total number of issues across all documents.
        invalid_documents: Number of documents with at least one issue.
        results: Per-document results, in input order.
        all_issues: Every issue paired with the name of its document.
    """

    status: Literal["pass", "fail"]
    documents_checked: int
    total_issues: int
    invalid_documents: int
    results: list[DocumentResult]
    all_issues: list[tuple[str, ValidationIssue]]


class ValidationRunner:
    """Runs one schema over a batch of documents.

    Supports:
    - Validating a single named document
    - Validating a mapping or list of named documents, sequentially or in parallel
    """

    def __init__(
        self,
        schema: Schema,
        parallel: bool = True,
        max_workers: int | None = None,
    ) -> None:
        """Initialize validation runner.

        Args:
            schema: Validator applied to every document.
            parallel: Whether to validate documents in a thread pool.
            max_workers: Thread pool size. None lets the executor decide.
        """
        self.schema = schema
        self.parallel = parallel
        self.max_workers = max_workers

    def run(
        self, documents: Mapping[str, Any] | Iterable[tuple[str, Any]]
    ) -> AggregatedResult:
        """Validate every document.

        Args:
            documents: Mapping of document name to loaded document, or
                (name, document) pairs. Pairs may repeat a name; each pair is
                validated and reported separately.

        Returns:
            AggregatedResult with combined outcomes.
        """
        pairs = list(documents.items()) if isinstance(documents, Mapping) else list(documents)

        if self.parallel and len(pairs) > 1:
            results = self._run_parallel(pairs)
        else:
            results = self._run_sequential(pairs)

        return self._aggregate_results(results)

    def run_single(self, name: str, document: Any) -> DocumentResult:
        """Validate one document.

        An exception escaping the schema (e.g. from a rule passed to
        create_validator) is reported as a failed result for this document.
        """
        logger.debug("Validating %s", name)
        try:
            result = self.schema(document)
        except Exception as e:
            logger.warning("Schema raised while validating %s: %s", name, e)
            result = invalid(f"Validator raised: {e!s}", document)
        return DocumentResult(name=name, result=result)

    def _run_sequential(self, documents: list[tuple[str, Any]]) -> list[DocumentResult]:
        return [self.run_single(name, document) for name, document in documents]

    def _run_parallel(self, documents: list[tuple[str, Any]]) -> list[DocumentResult]:
        """Validate documents using a ThreadPoolExecutor.

        Returns:
            Results in the same order as ``documents``.
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self.run_single, name, document)
                for name, document in documents
            ]
            return [future.result() for future in futures]

    def _aggregate_results(self, results: list[DocumentResult]) -> AggregatedResult:
        all_issues: list[tuple[str, ValidationIssue]] = []
        for document in results:
            all_issues.extend((document.name, issue) for issue in document.result.errors)

        invalid_documents = sum(1 for document in results if not document.is_valid)
        status: Literal["pass", "fail"] = "fail" if invalid_documents else "pass"

        return AggregatedResult(
            status=status,
            documents_checked=len(results),
            total_issues=len(all_issues),
            invalid_documents=invalid_documents,
            results=results,
            all_issues=all_issues,
        )
