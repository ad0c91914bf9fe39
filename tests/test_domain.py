"""
Tests for domain objects and error types.
"""

import pytest

from trenza.domain.operation import JoinSummary, MergeDetail, OperationStatus
from trenza.domain.repository import BranchResolution, SourceRepository
from trenza.exit_codes import (
    GENERAL_ERROR,
    RELOCATION_ERROR,
    CommandError,
    JoinError,
    RelocationError,
    format_error_chain,
    get_exit_code_for_exception,
)


class TestSourceRepository:

    def test_from_path_alias(self, tmp_path):
        repo = SourceRepository.from_path(tmp_path, tmp_path / "group" / "repoB")

        assert repo.alias == "group/repoB"
        assert repo.top_level == "group"

    def test_flat_alias(self, tmp_path):
        repo = SourceRepository.from_path(tmp_path, tmp_path / "repoA")

        assert repo.top_level == "repoA"

    def test_root_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            SourceRepository.from_path(tmp_path, tmp_path)

    def test_immutable(self, tmp_path):
        repo = SourceRepository.from_path(tmp_path, tmp_path / "repoA")
        with pytest.raises(AttributeError):
            repo.alias = "other"


class TestBranchResolution:

    def test_defaults(self):
        resolution = BranchResolution(ref="main")
        assert resolution.from_tag is False


class TestJoinSummary:

    def test_counts(self):
        summary = JoinSummary(root="/src", target="/src_joined")
        summary.add_detail(MergeDetail("/src/a", "a", OperationStatus.SUCCESS, ref="main"))
        summary.add_detail(MergeDetail("/src/b", "b", OperationStatus.FAILED, error="merge conflict"))

        assert summary.total == 2
        assert summary.merged == 1
        assert summary.failed == 1
        assert not summary.success
        assert summary.errors == ["b: merge conflict"]

    def test_to_dict(self):
        summary = JoinSummary(root="/src", target="/src_joined", dry_run=True)
        summary.add_detail(MergeDetail("/src/a", "a", OperationStatus.DRY_RUN))

        d = summary.to_dict()

        assert d['type'] == 'summary'
        assert d['merged'] == 1
        assert d['dry_run'] is True

    def test_detail_to_dict(self):
        detail = MergeDetail("/src/a", "a", OperationStatus.SUCCESS, ref="tmp_join_branch", from_tag=True)

        assert detail.to_dict() == {
            'path': '/src/a',
            'alias': 'a',
            'status': 'success',
            'ref': 'tmp_join_branch',
            'from_tag': True,
        }


class TestErrorChain:

    def _chain(self):
        try:
            try:
                try:
                    raise OSError("No space left on device")
                except OSError as e:
                    raise RelocationError("Failed to create parent directory") from e
            except RelocationError as e:
                raise JoinError("failed to merge repositories", e.exit_code) from e
        except JoinError as e:
            return e

    def test_format_error_chain(self):
        assert format_error_chain(self._chain()) == [
            "failed to merge repositories",
            "Caused by: Failed to create parent directory",
            "Caused by: No space left on device",
        ]

    def test_exit_code_from_outer_error(self):
        assert get_exit_code_for_exception(self._chain()) == RELOCATION_ERROR

    def test_exit_code_for_unknown_exception(self):
        assert get_exit_code_for_exception(RuntimeError("x")) == GENERAL_ERROR

    def test_command_error_default_code(self):
        assert CommandError("x").exit_code == GENERAL_ERROR
