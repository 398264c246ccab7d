import dataclasses

import pytest

from lwserver.cli import ServerCLI, ServerConfig, build_parser, parse_args
from lwserver.cli.converters import RedisEndpoint
from lwserver.cli.identity import RawPublicKeyIdentity
from lwserver.common.errors import (
    ConsolidationError,
    ConversionError,
    InvalidCIDError,
    InvalidEndpointError,
    InvalidPortError,
)
from lwserver.vars import CLIState


class TestDefaults:

    def test_no_flags_uses_documented_defaults(self):
        cli = ServerCLI.from_args([])
        assert cli.state == CLIState.UNVALIDATED

        config = cli.run()
        assert cli.state == CLIState.VALIDATED
        assert config.general.local_address is None
        assert config.general.local_port == 5683
        assert config.general.secure_local_address is None
        assert config.general.secure_local_port == 5684
        assert config.general.web_host is None
        assert config.general.web_port == 8080
        assert config.general.models_folder is None
        assert config.general.redis is None
        assert config.general.mdns is False
        assert config.dtls.cid == 6
        assert config.dtls.support_deprecated_ciphers is False
        assert config.identity is None

    def test_defaults_file_changes_defaults(self, tmp_path):
        path = tmp_path / "defaults.yaml"
        path.write_text("coap_port: 15683\ncoaps_port: 15684\n")
        config = ServerCLI.from_args(["--defaults-file", str(path)]).run()
        assert config.general.local_port == 15683
        assert config.general.secure_local_port == 15684

    def test_explicit_flag_beats_defaults_file(self, tmp_path):
        path = tmp_path / "defaults.yaml"
        path.write_text("coap_port: 15683\n")
        config = ServerCLI.from_args(["-df", str(path), "-lp", "6000"]).run()
        assert config.general.local_port == 6000


class TestOverrides:

    def test_coap_port_and_cid_off(self):
        config = ServerCLI.from_args(["--coap-port", "9999", "--connection-id", "off"]).run()
        assert config.general.local_port == 9999
        assert config.dtls.cid is None
        assert config.dtls.cid_enabled is False
        assert config.general.secure_local_address is None
        assert config.general.secure_local_port == 5684
        assert config.dtls.support_deprecated_ciphers is False

    def test_short_flags(self, tmp_path):
        config = ServerCLI.from_args([
            "-lh", "127.0.0.1", "-lp", "1000",
            "-slh", "127.0.0.2", "-slp", "1001",
            "-wh", "0.0.0.0", "-wp", "9090",
            "-m", str(tmp_path),
            "-r", "redis://:pw@localhost:6380/3",
            "-mdns",
            "-cid", "0",
            "-oc",
        ]).run()
        general = config.general
        assert general.local_address == "127.0.0.1"
        assert general.local_port == 1000
        assert general.secure_local_address == "127.0.0.2"
        assert general.secure_local_port == 1001
        assert general.web_host == "0.0.0.0"
        assert general.web_port == 9090
        assert general.models_folder == tmp_path
        assert general.redis == RedisEndpoint(host="localhost", port=6380, db=3, password="pw")
        assert general.mdns is True
        assert config.dtls.cid == 0
        assert config.dtls.support_deprecated_ciphers is True

    def test_negative_cid_disables(self):
        config = ServerCLI.from_args(["-cid", "-3"]).run()
        assert config.dtls.cid is None

    def test_rpk_identity(self, key_files):
        config = ServerCLI.from_args([
            "-pubk", str(key_files["pub.der"]),
            "-prik", str(key_files["priv.der"]),
        ]).run()
        assert isinstance(config.identity, RawPublicKeyIdentity)


class TestConversionErrors:

    @pytest.mark.parametrize("argv, error_type, flag", [
        (["--coap-port", "70000"], InvalidPortError, "-lp/--coap-port"),
        (["-slp", "x"], InvalidPortError, "-slp/--coaps-port"),
        (["-wp", "-1"], InvalidPortError, "-wp/--web-port"),
        (["-cid", "maybe"], InvalidCIDError, "-cid/--connection-id"),
        (["-r", "localhost:6379"], InvalidEndpointError, "-r/--redis"),
    ])
    def test_error_names_flag(self, argv, error_type, flag):
        with pytest.raises(error_type) as exc_info:
            ServerCLI.from_args(argv)
        assert exc_info.value.option == flag
        assert flag in exc_info.value.message

    def test_missing_models_folder(self, tmp_path):
        cli = ServerCLI.from_args(["-m", str(tmp_path / "models")])
        with pytest.raises(ConversionError) as exc_info:
            cli.run()
        assert exc_info.value.option == "-m/--models-folder"
        assert cli.state == CLIState.UNVALIDATED

    def test_unknown_flag_exits_with_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ServerCLI.from_args(["--no-such-flag"])
        assert exc_info.value.code == 2
        assert "--no-such-flag" in capsys.readouterr().err


class TestConsolidation:

    def test_two_identity_modes_rejected(self, key_files):
        cli = ServerCLI.from_args([
            "-pubk", str(key_files["pub.der"]),
            "-prik", str(key_files["priv.der"]),
            "-xcert", str(key_files["cert.pem"]),
            "-xprik", str(key_files["x509_priv.der"]),
        ])
        with pytest.raises(ConsolidationError):
            cli.run()
        assert cli.state == CLIState.UNVALIDATED
        with pytest.raises(RuntimeError):
            cli.config

    def test_same_port_on_any_address_rejected(self):
        cli = ServerCLI.from_args(["-lp", "5683", "-slp", "5683"])
        with pytest.raises(ConsolidationError) as exc_info:
            cli.run()
        assert exc_info.value.options == ("--coap-port", "--coaps-port")

    def test_same_port_on_distinct_addresses_allowed(self):
        config = ServerCLI.from_args([
            "-lh", "10.0.0.1", "-slh", "10.0.0.2", "-lp", "5683", "-slp", "5683",
        ]).run()
        assert config.general.local_port == config.general.secure_local_port

    @pytest.mark.parametrize("plain, secure", [
        ("0.0.0.0", "10.0.0.2"),
        ("::", "10.0.0.2"),
        ("fe80::1", "FE80:0:0::1"),
        ("::1", "0:0:0:0:0:0:0:1"),
        ("Coap.Local", "coap.local"),
    ])
    def test_same_port_on_equivalent_addresses_rejected(self, plain, secure):
        cli = ServerCLI.from_args(["-lh", plain, "-slh", secure, "-lp", "5683", "-slp", "5683"])
        with pytest.raises(ConsolidationError):
            cli.run()
        assert cli.state is CLIState.UNVALIDATED

    def test_hostnames_are_not_resolved(self):
        config = ServerCLI.from_args([
            "-lh", "localhost", "-slh", "127.0.0.1", "-lp", "5683", "-slp", "5683",
        ]).run()
        assert config.general.local_address == "localhost"

    def test_ephemeral_ports_allowed(self):
        config = ServerCLI.from_args(["-lp", "0", "-slp", "0"]).run()
        assert config.general.local_port == 0

    def test_secure_options_without_identity_warn(self, capture_logs):
        records = capture_logs("lwserver/cli")
        ServerCLI.from_args(["-oc", "-slh", "127.0.0.1"]).run()
        warnings = [r.getMessage() for r in records if r.levelname == "WARNING"]
        assert any("--support-deprecated-ciphers" in w for w in warnings)
        assert any("--coaps-host" in w for w in warnings)

    def test_run_is_terminal(self):
        cli = ServerCLI.from_args([])
        first = cli.run()
        assert cli.run() is first
        assert cli.config is first

    def test_config_is_immutable(self):
        config = ServerCLI.from_args([]).run()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.general = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.general.local_port = 1

    def test_to_dict_masks_redis_password(self):
        config = ServerCLI.from_args(["-r", "redis://:hunter2@localhost"]).run()
        summary = config.to_dict()
        assert "hunter2" not in str(summary)
        assert summary["general"]["redis"]["host"] == "localhost"


class TestHelp:

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--help"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "--coap-port" in out
        assert "DTLS Options" in out
        assert "Identity Options" in out

    def test_help_skips_other_processing(self, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-lp", "bogus", "-df", str(tmp_path / "missing.yaml"), "-h"])
        assert exc_info.value.code == 0

    def test_parser_groups_keep_declaration_order(self):
        parser = build_parser()
        titles = [group.title for group in parser._action_groups]
        assert titles.index("General") < titles.index("DTLS Options") < titles.index("Identity Options")


def test_server_config_default_identity():
    cli = ServerCLI()
    assert isinstance(cli.run(), ServerConfig)
