"""
Unit tests for report buckets, presets and the YAML presets file.
"""

import pytest

from models.errors import ErrorCode, ToolError
from models.status import AttributionActor, CandidateStatus
from schemas.records import Candidate
from utils.status_groups import (
    BUILTIN_PRESETS,
    FUNNEL_PRESET,
    PERFORMANCE_PRESET,
    StatusGroup,
    load_presets,
    parse_status_groups,
    resolve_status_groups,
)


class TestPresets:
    """Tests for the built-in presets."""

    def test_performance_layout(self):
        """The performance table columns appear in display order."""
        assert [g.key for g in PERFORMANCE_PRESET] == [
            "New",
            "Shortlisted",
            "Drop (M)",
            "Rej (M)",
            "Interviewed",
            "Selected",
            "Joined",
            "Hold",
            "Drop (C)",
            "Rej (C)",
        ]

    def test_funnel_layout(self):
        assert [g.key for g in FUNNEL_PRESET] == [
            "New",
            "Shortlisted",
            "Interviewed",
            "Selected",
            "Joined",
            "Rejected",
            "Dropped",
        ]

    def test_builtin_names(self):
        assert set(BUILTIN_PRESETS) == {"performance", "funnel"}


class TestStatusGroupMatch:
    """Tests for StatusGroup.match."""

    def test_direct_bucket_returns_candidate_status(self):
        group = StatusGroup("New", [CandidateStatus.NEW])
        assert group.match(Candidate(id="c", status="Screening")) == CandidateStatus.NEW
        assert group.match(Candidate(id="c", status="Joined")) is None

    def test_special_bucket_returns_main_status(self):
        group = StatusGroup("Rej (C)", main_status=CandidateStatus.REJECTED, actor=AttributionActor.CLIENT)
        interviewed = Candidate(id="c", status="Rejected", status_history=[{"status": "Interviewed"}])
        screened_out = Candidate(id="d", status="Rejected")

        assert group.match(interviewed) == CandidateStatus.REJECTED
        assert group.match(screened_out) is None

    def test_to_dict(self):
        assert PERFORMANCE_PRESET[3].to_dict() == {"key": "Rej (M)", "main_status": "Rejected", "actor": "Manager"}
        assert PERFORMANCE_PRESET[0].to_dict() == {"key": "New", "statuses": ["New"]}


class TestParseStatusGroups:
    """Tests for inline bucket definitions."""

    def test_direct_and_special(self):
        groups = parse_status_groups(
            [
                {"key": "Fresh", "statuses": ["New", "Screening"]},
                {"key": "Client said no", "main_status": "Reject", "actor": "Client"},
            ]
        )

        assert groups[0].statuses == frozenset({CandidateStatus.NEW})
        assert groups[1].main_status == CandidateStatus.REJECTED
        assert groups[1].actor == AttributionActor.CLIENT

    def test_empty_list_rejected(self):
        with pytest.raises(ToolError) as exc_info:
            parse_status_groups([])
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_duplicate_key_rejected(self):
        with pytest.raises(ToolError, match="duplicate key 'New'"):
            parse_status_groups([{"key": "New", "statuses": ["New"]}, {"key": "New", "statuses": ["Hold"]}])

    def test_unknown_status_rejected(self):
        with pytest.raises(ToolError) as exc_info:
            parse_status_groups([{"key": "X", "statuses": ["Mystery"]}])
        assert "status_groups" in exc_info.value.message
        assert "Unknown status 'Mystery'" in exc_info.value.message

    def test_main_status_must_be_negative(self):
        with pytest.raises(ToolError, match="main_status must be Rejected or Dropped"):
            parse_status_groups([{"key": "X", "main_status": "Joined", "actor": "Client"}])

    def test_special_needs_actor(self):
        with pytest.raises(ToolError, match="needs both main_status and actor"):
            parse_status_groups([{"key": "X", "main_status": "Rejected"}])

    def test_cannot_mix_kinds(self):
        with pytest.raises(ToolError, match="cannot mix"):
            parse_status_groups([{"key": "X", "statuses": ["New"], "main_status": "Rejected", "actor": "Client"}])

    def test_needs_some_criterion(self):
        with pytest.raises(ToolError, match="needs statuses"):
            parse_status_groups([{"key": "X"}])


class TestLoadPresets:
    """Tests for load_presets."""

    def test_no_file_returns_builtins(self):
        assert load_presets(None) == BUILTIN_PRESETS

    def test_file_adds_and_overrides(self, tmp_path):
        presets_file = tmp_path / "presets.yaml"
        presets_file.write_text(
            "presets:\n"
            "  weekly:\n"
            "    - key: Fresh\n"
            "      statuses: [New, Screening]\n"
            "    - key: Rej (C)\n"
            "      main_status: Rejected\n"
            "      actor: Client\n"
            "  funnel:\n"
            "    - key: Hired\n"
            "      statuses: [Joined]\n",
            encoding="utf-8",
        )

        presets = load_presets(presets_file)

        assert [g.key for g in presets["weekly"]] == ["Fresh", "Rej (C)"]
        assert [g.key for g in presets["funnel"]] == ["Hired"]
        assert presets["performance"] is PERFORMANCE_PRESET

    def test_missing_file(self, tmp_path):
        with pytest.raises(ToolError) as exc_info:
            load_presets(tmp_path / "nope.yaml")
        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND
        assert exc_info.value.message == "Presets file not found: nope.yaml"

    def test_missing_presets_mapping(self, tmp_path):
        presets_file = tmp_path / "presets.yaml"
        presets_file.write_text("weekly: []\n", encoding="utf-8")

        with pytest.raises(ToolError, match="missing 'presets' mapping"):
            load_presets(presets_file)

    def test_malformed_yaml(self, tmp_path):
        presets_file = tmp_path / "presets.yaml"
        presets_file.write_text("presets: [unclosed\n", encoding="utf-8")

        with pytest.raises(ToolError, match="Invalid presets file"):
            load_presets(presets_file)


class TestResolveStatusGroups:
    """Tests for resolve_status_groups."""

    def test_default_preset(self):
        assert [g.key for g in resolve_status_groups()] == [g.key for g in PERFORMANCE_PRESET]

    def test_named_preset(self):
        assert resolve_status_groups("funnel")[0].key == "New"
        assert len(resolve_status_groups("funnel")) == 7

    def test_inline_definitions_win(self):
        groups = resolve_status_groups("funnel", [{"key": "Only", "statuses": ["Hold"]}])
        assert [g.key for g in groups] == ["Only"]

    def test_unknown_preset(self):
        with pytest.raises(ToolError, match="Unknown status group preset 'weekly'. Available: funnel, performance"):
            resolve_status_groups("weekly")
