"""
Tests for datatype checks, resource tables and the generic resource validator.
"""

from dataclasses import replace

import pytest

from backend.attrverify.config import ResourceSpec, SecurityMode, VerifyConfig
from backend.attrverify.context import ValidationContext, VerifyEnvironment, default_environment
from backend.attrverify.datatypes import DATATYPE_CHECKS, DataType
from backend.attrverify.errors import ConfigError, ErrorKind
from backend.attrverify.models import AttributeValue, BatchRequest
from backend.attrverify.outcome import ValidationOutcome
from backend.attrverify.resources import ResourceDefinition, ResourceTable, load_resource_tables
from backend.attrverify.validator.registry import VALUE_CHECKS
from backend.attrverify.validator.resource import verify_value_resc


def check_datatype(datatype, value):
    """Run a datatype check and return whether it passed."""
    return DATATYPE_CHECKS[datatype](AttributeValue("r", value)).ok


def resc(resource, value, name="Resource_List"):
    return AttributeValue(name=name, value=value, resource=resource)


class TestDatatypeChecks:
    """Tests for the per-type parsers."""

    @pytest.mark.parametrize("value", ["0", "42", "-7", "+3"])
    def test_long_valid(self, value):
        """Test valid longs."""
        assert check_datatype(DataType.LONG, value)

    @pytest.mark.parametrize("value", ["", "4.5", "four", "4x", None, "١٢", "4\n5"])
    def test_long_invalid(self, value):
        """Test invalid longs."""
        assert not check_datatype(DataType.LONG, value)

    @pytest.mark.parametrize("value", ["1024", "4gb", "4GB", "16mw", "2k"])
    def test_size_valid(self, value):
        """Test valid sizes."""
        assert check_datatype(DataType.SIZE, value)

    @pytest.mark.parametrize("value", ["4xb", "-1gb", "gb", "1.5gb", "٤gb", "4\u212ab"])
    def test_size_invalid(self, value):
        """Test invalid sizes."""
        assert not check_datatype(DataType.SIZE, value)

    @pytest.mark.parametrize("value", ["1.5", "-2", ".5", "1e3", "2.5E-2"])
    def test_float_valid(self, value):
        """Test valid floats."""
        assert check_datatype(DataType.FLOAT, value)

    def test_float_invalid(self):
        """Test invalid float."""
        assert not check_datatype(DataType.FLOAT, "1.2.3")

    @pytest.mark.parametrize("value", ["01:30:00", "90", "1:59", "10:00.5"])
    def test_time_valid(self, value):
        """Test valid times."""
        assert check_datatype(DataType.TIME, value)

    @pytest.mark.parametrize("value", ["1:60", "1:2:3:4", "abc", ""])
    def test_time_invalid(self, value):
        """Test invalid times."""
        assert not check_datatype(DataType.TIME, value)

    def test_boolean(self):
        """Test boolean words."""
        assert check_datatype(DataType.BOOLEAN, "True")
        assert check_datatype(DataType.BOOLEAN, "n")
        assert not check_datatype(DataType.BOOLEAN, "maybe")

    def test_string(self):
        """Test any present string passes."""
        assert check_datatype(DataType.STRING, "")
        assert not check_datatype(DataType.STRING, None)


class TestResourceTable:
    """Tests for ResourceTable."""

    def test_case_insensitive_lookup(self):
        """Test lookups ignore case."""
        table = ResourceTable([ResourceDefinition("NCpus", DataType.LONG)])
        assert table.lookup("ncpus").name == "NCpus"
        assert "NCPUS" in table
        assert table["ncpus"].datatype == DataType.LONG
        assert list(table) == ["NCpus"]
        assert table.lookup("mem") is None

    def test_merged(self):
        """Test merging replaces same-named entries."""
        table = ResourceTable([ResourceDefinition("foo"), ResourceDefinition("bar")])
        merged = table.merged([ResourceDefinition("FOO", DataType.LONG)])
        assert len(merged) == 2
        assert merged["foo"].datatype == DataType.LONG
        assert table["foo"].datatype == DataType.STRING

    def test_from_specs_unknown_value_check(self):
        """Test an unknown value check name is a configuration error."""
        with pytest.raises(ConfigError):
            ResourceTable.from_specs([ResourceSpec(name="foo", value_check="nope")], VALUE_CHECKS)

    def test_definition_runs_value_check_after_datatype(self):
        """Test the value check only runs when the datatype check passed."""
        calls = []

        def value_check(context, attr):
            calls.append(attr.value)
            return ValidationOutcome.success()

        definition = ResourceDefinition(
            "foo", DataType.LONG, DATATYPE_CHECKS[DataType.LONG], value_check
        )
        context = ValidationContext(BatchRequest.QUEUE_JOB)
        assert not definition.verify(context, AttributeValue("foo", "x")).ok
        assert definition.verify(context, AttributeValue("foo", "5")).ok
        assert calls == ["5"]


class TestLoadResourceTables:
    """Tests for load_resource_tables."""

    def test_load(self):
        """Test loading both tables."""
        resources, resv_attrs = load_resource_tables(
            "resources:\n"
            "  - name: ngpus\n"
            "    type: long\n"
            "    value_check: zero_or_positive\n"
            "reservation_attributes:\n"
            "  - name: queue\n",
            VALUE_CHECKS,
        )
        assert resources["ngpus"].value_check_name == "zero_or_positive"
        assert "queue" in resv_attrs

    def test_empty(self):
        """Test empty document gives empty tables."""
        resources, resv_attrs = load_resource_tables("", VALUE_CHECKS)
        assert len(resources) == 0
        assert len(resv_attrs) == 0

    @pytest.mark.parametrize("content", [
        "- a\n",
        "resources: [\n",
        "resources:\n  - type: long\n",
        "resources:\n  - name: x\n    type: matrix\n",
    ])
    def test_invalid(self, content):
        """Test malformed resource files."""
        with pytest.raises(ConfigError):
            load_resource_tables(content, VALUE_CHECKS)


class TestVerifyEnvironment:
    """Tests for building the environment from configuration."""

    def test_builtin_tables(self):
        """Test the packaged tables are loaded."""
        env = default_environment()
        for name in ("ncpus", "mem", "walltime", "select", "preempt_targets"):
            assert name in env.resources
        assert "queue" in env.reservation_attributes

    def test_site_resources_merged(self):
        """Test site resources are added to the packaged ones."""
        config = VerifyConfig(resources=[ResourceSpec(name="licenses", type="long", value_check="non_zero_positive")])
        env = VerifyEnvironment.from_config(config)
        assert "licenses" in env.resources
        assert "ncpus" in env.resources

    def test_site_resources_file(self, tmp_path):
        """Test a site resource file replaces the packaged one."""
        path = tmp_path / "resources.yaml"
        path.write_text("resources:\n  - name: only\n", encoding="utf-8")
        env = VerifyEnvironment.from_config(VerifyConfig(resources_file=path))
        assert list(env.resources) == ["only"]

    def test_missing_resources_file(self, tmp_path):
        """Test a missing resource file is a configuration error."""
        with pytest.raises(ConfigError):
            VerifyEnvironment.from_config(VerifyConfig(resources_file=tmp_path / "none.yaml"))

    def test_settings(self):
        """Test scalar settings are carried over."""
        config = VerifyConfig(
            max_licenses=8, default_server="svr", security=SecurityMode.KRB5, local_hostname="submit"
        )
        env = VerifyEnvironment.from_config(config)
        assert env.max_licenses == 8
        assert env.default_server == "svr"
        assert env.kerberos is True
        assert env.local_host == "submit"


class TestVerifyValueResc:
    """Tests for the generic resource validator."""

    def setup_method(self):
        self.context = ValidationContext(BatchRequest.QUEUE_JOB)

    def test_valid(self):
        """Test valid resource values."""
        assert verify_value_resc(self.context, resc("ncpus", "4")).ok
        assert verify_value_resc(self.context, resc("mem", "8gb")).ok
        assert verify_value_resc(self.context, resc("walltime", "01:00:00")).ok

    def test_datatype_failure_message(self):
        """Test a datatype failure names the attribute and resource."""
        outcome = verify_value_resc(self.context, resc("mem", "lots"))
        assert outcome.code == ErrorKind.BAD_VALUE
        assert outcome.message == "Illegal attribute or resource value for Resource_List.mem"

    def test_value_check_failure(self):
        """Test a value check failure after the datatype passed."""
        outcome = verify_value_resc(self.context, resc("ncpus", "-1"))
        assert outcome.code == ErrorKind.BAD_VALUE
        assert outcome.message == "Illegal attribute or resource value for Resource_List.ncpus"

    def test_unknown_resource_passes(self):
        """Test custom resources pass."""
        assert verify_value_resc(self.context, resc("foo_licenses", "anything")).ok

    def test_case_insensitive(self):
        """Test resource names are matched without case."""
        assert not verify_value_resc(self.context, resc("NCPUS", "x")).ok

    def test_no_resource(self):
        """Test an attribute without a resource passes."""
        assert verify_value_resc(self.context, AttributeValue("Resource_List", "x")).ok

    def test_none(self):
        """Test a missing attribute is an internal error."""
        assert verify_value_resc(self.context, None).code == ErrorKind.INTERNAL

    def test_site_resource(self):
        """Test a site resource's checks are applied."""
        env = VerifyEnvironment.from_config(
            VerifyConfig(resources=[ResourceSpec(name="licenses", type="long", value_check="non_zero_positive")])
        )
        context = replace(self.context, environment=env)
        assert verify_value_resc(context, resc("licenses", "2")).ok
        assert not verify_value_resc(context, resc("licenses", "0")).ok
