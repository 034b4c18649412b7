"""
===============================================================================
QUATLIB - Command-Line Front End Tests
===============================================================================
"""

import pytest

from quatlib.cli import main, parse_exponent, parse_quaternion, parse_vector
from quatlib import Quaternion


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestParsing:

    def test_parse_quaternion(self):
        assert parse_quaternion("1,2,3,4") == Quaternion(1.0, (2.0, 3.0, 4.0))

    def test_parse_vector(self):
        assert parse_vector("1, -2.5, 3") == (1.0, -2.5, 3.0)

    @pytest.mark.parametrize("text", ["1,2,3", "1,2,3,4,5", "1,a,3,4", ""])
    def test_bad_quaternion(self, text):
        with pytest.raises(ValueError):
            parse_quaternion(text)

    def test_exponent_types(self):
        assert type(parse_exponent("3")) is int
        assert type(parse_exponent("0.5")) is float
        with pytest.raises(ValueError):
            parse_exponent("two")


class TestCommands:

    def test_mul(self, capsys):
        code, out, _ = run(capsys, 'mul', '1,2,3,4', '5,6,7,8')
        assert code == 0
        assert out == "-60.000000 + 12.000000i + 30.000000j + 24.000000k\n"

    def test_add_with_precision(self, capsys):
        _, out, _ = run(capsys, '--precision', '2', 'add', '1,2,3,4', '5,6,7,8')
        assert out == "6.00 + 8.00i + 10.00j + 12.00k\n"

    def test_sub(self, capsys):
        _, out, _ = run(capsys, '--precision', '1', 'sub', '1,2,3,4', '5,6,7,8')
        assert out == "-4.0 - 4.0i - 4.0j - 4.0k\n"

    def test_div(self, capsys):
        _, out, _ = run(capsys, '--precision', '3', 'div', '1,2,3,4', '1,2,3,4')
        assert out == "1.000 + 0.000i + 0.000j + 0.000k\n"

    def test_integer_pow(self, capsys):
        _, out, _ = run(capsys, '--precision', '0', 'pow', '2,2,3,4', '2')
        assert out == "-25 + 8i + 12j + 16k\n"

    def test_real_pow(self, capsys):
        _, out, _ = run(capsys, '--precision', '0', 'pow', '4,0,0,0', '0.5')
        assert out == "2 + 0i + 0j + 0k\n"

    def test_rotate(self, capsys):
        _, out, _ = run(capsys, '--precision', '3', 'rotate', '0,0,0,1', '1,0,0')
        assert out == "(-1.000, 0.000, 0.000)\n"

    def test_slerp(self, capsys):
        _, out, _ = run(capsys, '--precision', '4', 'slerp', '1,0,0,0', '0,0,0,1', '0.5')
        assert out == "0.7071 + 0.0000i + 0.0000j + 0.7071k\n"

    def test_from_euler_degrees(self, capsys):
        _, out, _ = run(capsys, '--degrees', '--precision', '4',
                        'from-euler', '0', '0', '90')
        assert out == "0.7071 + 0.0000i + 0.0000j + 0.7071k\n"

    def test_from_axis_angle_degrees(self, capsys):
        _, out, _ = run(capsys, '--degrees', '--precision', '4',
                        'from-axis-angle', '0,0,1', '180')
        assert out == "0.0000 + 0.0000i + 0.0000j + 1.0000k\n"

    def test_info(self, capsys):
        code, out, _ = run(capsys, 'info', '1,2,3,4')
        assert code == 0
        assert "square_len : 30.000000" in out
        assert "magnitude  : 5.477226" in out
        assert "unit       : False" in out
        assert "conjugate  : 1.000000 - 2.000000i - 3.000000j - 4.000000k" in out
        assert "normalized : 0.182574 + 0.365148i + 0.547723j + 0.730297k" in out

    def test_info_identity_degrees(self, capsys):
        _, out, _ = run(capsys, '--degrees', '--precision', '1', 'info', '1,0,0,0')
        assert "euler      : roll=0.0 deg, pitch=0.0 deg, yaw=0.0 deg" in out
        assert "axis-angle : axis=(0.0, 0.0, 1.0), angle=0.0 deg" in out


class TestConfigAndErrors:

    def test_precision_from_config(self, capsys, tmp_path):
        path = tmp_path / 'cfg.yaml'
        path.write_text("numeric:\n  precision: 1\n")
        _, out, _ = run(capsys, '--config', str(path), 'add', '1,2,3,4', '5,6,7,8')
        assert out == "6.0 + 8.0i + 10.0j + 12.0k\n"

    def test_precision_flag_overrides_config(self, capsys, tmp_path):
        path = tmp_path / 'cfg.yaml'
        path.write_text("numeric:\n  precision: 1\n")
        _, out, _ = run(capsys, '--config', str(path), '--precision', '0',
                        'add', '1,2,3,4', '5,6,7,8')
        assert out == "6 + 8i + 10j + 12k\n"

    def test_malformed_quaternion(self, capsys):
        code, out, err = run(capsys, 'mul', '1,2,3', '5,6,7,8')
        assert code == 2
        assert out == ""
        assert "error:" in err

    def test_zero_axis(self, capsys):
        code, _, err = run(capsys, 'from-axis-angle', '0,0,0', '1.0')
        assert code == 2
        assert "zero magnitude" in err

    def test_missing_config(self, capsys, tmp_path):
        code, _, err = run(capsys, '--config', str(tmp_path / 'nope.yaml'),
                           'add', '1,2,3,4', '5,6,7,8')
        assert code == 2
        assert "not found" in err

    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit):
            main(['frobnicate'])

    def test_malformed_yaml_config(self, capsys, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("numeric: [unclosed\n")
        code, out, err = run(capsys, '--config', str(path), 'mul', '1,2,3,4', '5,6,7,8')
        assert code == 2
        assert out == ""
        assert "error: Invalid YAML" in err

    def test_fractional_precision_in_config(self, capsys, tmp_path):
        path = tmp_path / 'cfg.yaml'
        path.write_text("numeric:\n  precision: 6.5\n")
        code, _, err = run(capsys, '--config', str(path), 'add', '1,2,3,4', '5,6,7,8')
        assert code == 2
        assert "precision must be an integer" in err


class TestCompare:

    def test_identical(self, capsys):
        code, out, _ = run(capsys, '--precision', '3', 'compare', '1,2,3,4', '1,2,3,4')
        assert code == 0
        assert out == "equal   : True\nisclose : True\nangle   : 0.000 rad\n"

    def test_close_but_not_equal(self, capsys):
        _, out, _ = run(capsys, 'compare', '1,2,3,4', '1,2,3,4.0000000001')
        assert "equal   : False" in out
        assert "isclose : True" in out

    def test_tolerance_from_config(self, capsys, tmp_path):
        path = tmp_path / 'cfg.yaml'
        path.write_text("numeric:\n  comparison_tolerance: 1.0e-12\n")
        _, out, _ = run(capsys, '--config', str(path),
                        'compare', '1,2,3,4', '1,2,3,4.0000000001')
        assert "isclose : False" in out

    def test_negated_quaternion(self, capsys):
        _, out, _ = run(capsys, '--degrees', '--precision', '1',
                        'compare', '0,0,0,1', '0,0,0,-1')
        assert "isclose : False" in out
        assert "angle   : 0.0 deg" in out
