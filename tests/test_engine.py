"""
Tests for attribute dispatch and the verification engine.
"""

from dataclasses import replace

import pytest

from backend.attrverify.context import ValidationContext, default_environment
from backend.attrverify.errors import ConfigError, ErrorKind, error_text
from backend.attrverify.models import AttributeValue, BatchRequest, ParentObject
from backend.attrverify.validator import (
    FAMILY_VALIDATORS,
    VALUE_CHECKS,
    AttributeFamily,
    VerifyEngine,
    family_for,
    verify_attribute,
    verify_request,
)


def make_engine(**settings):
    """Engine over the packaged environment with some settings replaced."""
    settings.setdefault("hostname", "submit.example.com")
    settings.setdefault("cwd", "/home/bob")
    return VerifyEngine(replace(default_environment(), **settings))


class TestRegistry:
    """Tests for the attribute family tables."""

    def test_every_family_has_validator(self):
        """Test the dispatch table is complete."""
        assert set(FAMILY_VALIDATORS) == set(AttributeFamily)

    def test_value_checks(self):
        """Test value checks exclude the generic resource validator."""
        assert "resource" not in VALUE_CHECKS
        assert VALUE_CHECKS["select"] is FAMILY_VALIDATORS[AttributeFamily.SELECT]

    def test_family_for(self):
        """Test attribute names map to families without case."""
        assert family_for("Job_Name") is AttributeFamily.JOB_NAME
        assert family_for("job_name") is AttributeFamily.JOB_NAME
        assert family_for("RESOURCE_LIST") is AttributeFamily.RESOURCE
        assert family_for("managers") is AttributeFamily.MGR_OPR_ACL
        assert family_for("comment") is None


class TestVerifyAttribute:
    """Tests for verify_attribute dispatch."""

    def setup_method(self):
        self.context = ValidationContext(BatchRequest.QUEUE_JOB)

    def test_dispatch(self):
        """Test attributes reach their family's validator."""
        assert verify_attribute(self.context, AttributeValue("Hold_Types", "u")).ok
        assert not verify_attribute(self.context, AttributeValue("Hold_Types", "un")).ok
        assert verify_attribute(self.context, AttributeValue("Resource_List", "2:ncpus=4", resource="select")).ok

    def test_resource_message(self):
        """Test resource failures name the attribute and resource."""
        outcome = verify_attribute(self.context, AttributeValue("Resource_List", "-1", resource="ncpus"))
        assert outcome.code == ErrorKind.BAD_VALUE
        assert outcome.message == "Illegal attribute or resource value for Resource_List.ncpus"

    def test_unknown_attribute_passes(self):
        """Test attributes without a family pass."""
        assert verify_attribute(self.context, AttributeValue("comment", "anything")).ok

    def test_none(self):
        """Test a missing attribute is an internal error."""
        assert verify_attribute(self.context, None).code == ErrorKind.INTERNAL

    def test_memory_error(self, monkeypatch):
        """Test running out of memory is a system error."""
        def exhausted(context, attr):
            raise MemoryError()

        monkeypatch.setitem(FAMILY_VALIDATORS, AttributeFamily.HOLD, exhausted)
        assert verify_attribute(self.context, AttributeValue("Hold_Types", "u")).code == ErrorKind.SYSTEM

    def test_repeatable(self):
        """Test the same input gives the same outcome."""
        attr = AttributeValue("depend", "afterok:12")
        assert verify_attribute(self.context, attr) == verify_attribute(self.context, attr)


class TestVerifyEngine:
    """Tests for VerifyEngine."""

    def test_accepts_and_rewrites(self):
        """Test rewritten values are carried in the result only."""
        attributes = [
            AttributeValue("Job_Name", "myjob"),
            AttributeValue("depend", "afterok:12"),
            AttributeValue("Output_Path", "out.log"),
            AttributeValue("Hold_Types", "u"),
        ]
        submitted = list(attributes)
        result = make_engine(default_server="svr").verify(BatchRequest.QUEUE_JOB, attributes)

        assert result.valid
        assert result.checked == 4
        assert result.failure is None
        assert result.rewritten == ["depend", "Output_Path"]
        assert result.attributes[1].value == "afterok:12.svr"
        assert result.attributes[2].value == "submit.example.com:/home/bob/out.log"
        assert attributes == submitted
        assert attributes[1].value == "afterok:12"

    def test_stops_at_first_failure(self):
        """Test the first failing attribute rejects the request."""
        attributes = [
            AttributeValue("Job_Name", "myjob"),
            AttributeValue("Hold_Types", "un"),
            AttributeValue("Priority", "99999"),
        ]
        result = make_engine().verify(BatchRequest.QUEUE_JOB, attributes)

        assert not result.valid
        assert result.checked == 2
        assert result.failure.attribute.name == "Hold_Types"
        assert result.failure.code == ErrorKind.BAD_VALUE
        assert result.failure.message == "Illegal attribute or resource value for Hold_Types"
        assert str(result.failure).startswith("[bad_value] Hold_Types")

    def test_missing_attribute(self):
        """Test a missing attribute rejects the request without raising."""
        attributes = [AttributeValue("Job_Name", "myjob"), None]
        result = make_engine().verify(BatchRequest.QUEUE_JOB, attributes)

        assert not result.valid
        assert result.checked == 2
        assert result.failure.attribute is None
        assert result.failure.value is None
        assert result.failure.code == ErrorKind.INTERNAL
        assert result.failure.message == error_text(ErrorKind.INTERNAL)
        assert "<missing>" in str(result.failure)
        assert result.to_dict()["failure"]["attribute"] == "<missing>"

    def test_request_kind_matters(self):
        """Test the same value verified for different requests."""
        attributes = [AttributeValue("Priority", "5000")]
        assert not make_engine().verify(BatchRequest.QUEUE_JOB, attributes).valid
        assert make_engine().verify(BatchRequest.SELECT_JOBS, attributes).valid

    def test_empty_request(self):
        """Test a request without attributes is accepted."""
        result = make_engine().verify(BatchRequest.MODIFY_JOB, [])
        assert result.valid
        assert result.checked == 0

    def test_summary(self):
        """Test result summary."""
        result = make_engine().verify(BatchRequest.QUEUE_JOB, [AttributeValue("Join_Path", "x")])
        summary = result.summary()
        assert "REJECTED" in summary
        assert "Join_Path" in summary

    def test_to_dict(self):
        """Test result dictionary."""
        result = make_engine(default_server="svr").verify(
            BatchRequest.QUEUE_JOB, [AttributeValue("depend", "afterok:1")]
        )
        data = result.to_dict()
        assert data["valid"] is True
        assert data["rewritten"] == ["depend"]
        assert data["attributes"][0]["value"] == "afterok:1.svr"
        assert data["failure"] is None

    def test_verify_request(self):
        """Test the convenience function."""
        result = verify_request(
            BatchRequest.MANAGER,
            [AttributeValue("queue_type", "Execution")],
            ParentObject.QUEUE,
        )
        assert result.valid
        assert result.parent_object == ParentObject.QUEUE


class TestVerifyFile:
    """Tests for VerifyEngine.verify_file."""

    def test_verify_file(self, tmp_path):
        """Test verifying a request file."""
        path = tmp_path / "request.yaml"
        path.write_text(
            "request: select_jobs\n"
            "attributes:\n"
            "  - name: Checkpoint\n"
            "    value: u\n"
            "    op: eq\n"
            "  - name: Resource_List\n"
            "    resource: ncpus\n"
            "    value: 4\n"
            "  - name: Priority\n"
            "    value: 2000\n",
            encoding="utf-8",
        )
        result = make_engine().verify_file(path)
        assert result.valid
        assert result.batch_request == BatchRequest.SELECT_JOBS
        assert result.attributes[1].value == "4"

    def test_verify_file_rejected(self, tmp_path):
        """Test a rejected request file."""
        path = tmp_path / "request.yaml"
        path.write_text(
            "request: submit_resv\n"
            "parent: reservation\n"
            "attributes:\n"
            "  - name: Reserve_Name\n"
            "    value: r1\n"
            "  - name: reserve_count\n"
            "    value: 0\n",
            encoding="utf-8",
        )
        result = make_engine().verify_file(path)
        assert not result.valid
        assert result.failure.attribute.name == "reserve_count"

    @pytest.mark.parametrize("content", [
        "- just a list\n",
        "request: launch_job\n",
        "attributes:\n  - value: 1\n",
        "attributes:\n  - name: Priority\n    op: sideways\n",
        "request: [\n",
    ])
    def test_invalid_file(self, tmp_path, content):
        """Test malformed request files."""
        path = tmp_path / "request.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            make_engine().verify_file(path)

    def test_missing_file(self, tmp_path):
        """Test a missing request file."""
        with pytest.raises(ConfigError):
            make_engine().verify_file(tmp_path / "missing.yaml")
