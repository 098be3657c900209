"""Tests for tensor <-> OpenCV copy loop synthesis."""

from __future__ import annotations

import logging

import pytest

from tfcv_opgen.codegen import Direction, render, synthesize
from tfcv_opgen.codegen.ast import For, If
from tfcv_opgen.shape import classify_shape


def _text(tokens, direction: Direction, name: str = "a") -> str:
    conversion = synthesize(name, classify_shape(tokens), direction)
    return render(conversion.sizes + conversion.body)


def _loop_depth(stmts) -> int:
    depth = 0
    for stmt in stmts:
        if isinstance(stmt, For):
            depth = max(depth, 1 + _loop_depth(stmt.body))
    return depth


class TestTensorToCv:
    """Inputs: tensor -> container."""

    def test_scalar(self) -> None:
        conversion = synthesize("a", classify_shape(["int"]), Direction.TENSOR_TO_CV)
        assert conversion.sizes == ()
        assert render(conversion.body) == "int a_cv = a_in_data(0);"

    def test_mat_multichannel(self) -> None:
        assert _text(["none", "none", "CV_64FC3"], Direction.TENSOR_TO_CV) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_in.dim_size(0));",
            "const int32 a_dims_size_1 = static_cast<int32>(a_in.dim_size(1));",
            "const int32 a_dims_size_2 = static_cast<int32>(a_in.dim_size(2));",
            'OP_REQUIRES(context, a_dims_size_2 == 3, '
            'errors::InvalidArgument("a must have 3 channels in dimension 2"));',
            "const int a_shape[] = { a_dims_size_0, a_dims_size_1 };",
            "Mat a_cv(2, a_shape, CV_64FC3);",
            "for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {",
            "  for (int a_dims_1 = 0; a_dims_1 < a_dims_size_1; a_dims_1++) {",
            "    a_cv.at<Vec<double, 3>>(a_dims_0, a_dims_1)[0] = a_in_data(a_dims_0, a_dims_1, 0);",
            "    a_cv.at<Vec<double, 3>>(a_dims_0, a_dims_1)[1] = a_in_data(a_dims_0, a_dims_1, 1);",
            "    a_cv.at<Vec<double, 3>>(a_dims_0, a_dims_1)[2] = a_in_data(a_dims_0, a_dims_1, 2);",
            "  }",
            "}",
        ])

    def test_fixed_matx(self) -> None:
        text = _text(["3", "3", "CV_32F:Matx"], Direction.TENSOR_TO_CV)
        assert 'OP_REQUIRES(context, a_dims_size_0 == 3, ' in text
        assert '"a must have 3 elements in dimension 1"' in text
        assert "Matx<float, 3, 3> a_cv;" in text
        assert "a_cv(a_dims_0, a_dims_1) = a_in_data(a_dims_0, a_dims_1);" in text
        assert "a_shape" not in text

    def test_vec(self) -> None:
        text = _text(["4", "CV_64F:Vec"], Direction.TENSOR_TO_CV)
        assert "Vec<double, 4> a_cv;" in text
        assert "a_cv[a_dims_0] = a_in_data(a_dims_0);" in text

    def test_flat_vector(self) -> None:
        assert _text(["vector:none", "double"], Direction.TENSOR_TO_CV) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_in.dim_size(0));",
            "vector<double> a_cv;",
            "for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {",
            "  a_cv.push_back(a_in_data(a_dims_0));",
            "}",
        ])

    def test_jagged_vector(self) -> None:
        text = _text(["vector:none", "vector:none", "double"], Direction.TENSOR_TO_CV)
        assert text.endswith("\n".join([
            "vector<vector<double>> a_cv(a_dims_size_0);",
            "for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {",
            "  for (int a_dims_1 = 0; a_dims_1 < a_dims_size_1; a_dims_1++) {",
            "    if (std::isnan(a_in_data(a_dims_0, a_dims_1))) { break; }",
            "    a_cv[a_dims_0].push_back(a_in_data(a_dims_0, a_dims_1));",
            "  }",
            "}",
        ]))

    def test_three_vector_layers_grow_rows(self) -> None:
        text = _text(["vector:none", "vector:none", "vector:none", "float"], Direction.TENSOR_TO_CV)
        assert "    if (std::isnan(a_in_data(a_dims_0, a_dims_1, 0))) { break; }" in text
        assert "    a_cv[a_dims_0].emplace_back();" in text
        assert "      a_cv[a_dims_0][a_dims_1].push_back(a_in_data(a_dims_0, a_dims_1, a_dims_2));" in text

    def test_known_inner_size_has_no_guard(self) -> None:
        text = _text(["vector:none", "vector:4", "double"], Direction.TENSOR_TO_CV)
        assert "isnan" not in text

    def test_integer_rows_warn_instead_of_nan_guard(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="tfcv_opgen"):
            text = _text(["vector:none", "vector:none", "int"], Direction.TENSOR_TO_CV)
        assert "isnan" not in text
        assert any("no NaN end marker" in r.getMessage() for r in caplog.records)

    def test_vector_of_mat(self) -> None:
        assert _text(["vector:none", "100", "CV_8S"], Direction.TENSOR_TO_CV) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_in.dim_size(0));",
            "const int32 a_dims_size_1 = static_cast<int32>(a_in.dim_size(1));",
            "vector<Mat> a_cv;",
            "const int a_mat_shape[] = { a_dims_size_1 };",
            "for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {",
            "  Mat a_mat(1, a_mat_shape, CV_8S);",
            "  for (int a_dims_1 = 0; a_dims_1 < a_dims_size_1; a_dims_1++) {",
            "    a_mat.at<int8_t>(a_dims_1) = a_in_data(a_dims_0, a_dims_1);",
            "  }",
            "  a_cv.push_back(a_mat);",
            "}",
        ])

    def test_jagged_vector_of_mat(self) -> None:
        conversion = synthesize(
            "b", classify_shape(["vector:3", "vector:none", "2", "2", "CV_32FC2"]),
            Direction.TENSOR_TO_CV,
        )
        text = render(conversion.body)
        assert "vector<vector<Mat>> b_cv(b_dims_size_0);" in text
        assert "if (std::isnan(b_in_data(b_dims_0, b_dims_1, 0, 0, 0))) { break; }" in text
        assert "Mat b_mat(2, b_mat_shape, CV_32FC2);" in text
        assert "b_cv[b_dims_0].push_back(b_mat);" in text
        assert _loop_depth(conversion.body) == 4

    def test_vector_of_matx(self) -> None:
        text = _text(["vector:none", "3", "3", "CV_32F:Matx"], Direction.TENSOR_TO_CV)
        assert "Matx<float, 3, 3> a_mat;" in text
        assert "a_mat_shape" not in text
        assert "a_mat(a_dims_1, a_dims_2) = a_in_data(a_dims_0, a_dims_1, a_dims_2);" in text


class TestCvToTensor:
    """Outputs: container -> tensor."""

    def test_scalar(self) -> None:
        conversion = synthesize("r", classify_shape(["double"]), Direction.CV_TO_TENSOR)
        assert render(conversion.body) == "r_out_data(0) = r_cv;"
        assert conversion.shape == ()
        assert conversion.empty_guard is None

    def test_mat_multichannel(self) -> None:
        conversion = synthesize("a", classify_shape(["none", "none", "CV_64FC3"]),
                                Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_cv.size[0]);",
            "const int32 a_dims_size_1 = static_cast<int32>(a_cv.size[1]);",
        ])
        assert [e.render() for e in conversion.shape] == ["a_dims_size_0", "a_dims_size_1", "3"]
        body = render(conversion.body)
        assert "a_out_data(a_dims_0, a_dims_1, 2) = a_cv.at<Vec<double, 3>>(a_dims_0, a_dims_1)[2];" in body
        assert conversion.empty_guard is None

    def test_fixed_sizes_are_literals(self) -> None:
        conversion = synthesize("m", classify_shape(["3", "3", "CV_32F:Matx"]), Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 m_dims_size_0 = static_cast<int32>(3);",
            "const int32 m_dims_size_1 = static_cast<int32>(3);",
        ])
        assert "m_out_data(m_dims_0, m_dims_1) = m_cv(m_dims_0, m_dims_1);" in render(conversion.body)

    def test_vector(self) -> None:
        conversion = synthesize("v", classify_shape(["vector:none", "vector:none", "int"]),
                                Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 v_dims_size_0 = static_cast<int32>(v_cv.size());",
            "const int32 v_dims_size_1 = static_cast<int32>(v_cv[0].size());",
        ])
        assert "v_out_data(v_dims_0, v_dims_1) = v_cv[v_dims_0][v_dims_1];" in render(conversion.body)
        assert conversion.empty_guard.render() == "v_cv.empty()"
        assert [e.render() for e in conversion.empty_shape] == ["0", "0"]

    def test_vector_of_mat(self) -> None:
        conversion = synthesize("a", classify_shape(["vector:none", "100", "CV_8S"]),
                                Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_cv.size());",
            "const int32 a_dims_size_1 = static_cast<int32>(a_cv[0].size[0]);",
        ])
        assert render(conversion.body) == "\n".join([
            "for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {",
            "  for (int a_dims_1 = 0; a_dims_1 < a_dims_size_1; a_dims_1++) {",
            "    a_out_data(a_dims_0, a_dims_1) = a_cv[a_dims_0].at<int8_t>(a_dims_1);",
            "  }",
            "}",
        ])
        assert [e.render() for e in conversion.empty_shape] == ["0", "100"]

    def test_vector_of_matx_sizes_are_literals(self) -> None:
        conversion = synthesize("m", classify_shape(["vector:none", "3", "3", "CV_32F:Matx"]),
                                Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 m_dims_size_0 = static_cast<int32>(m_cv.size());",
            "const int32 m_dims_size_1 = static_cast<int32>(3);",
            "const int32 m_dims_size_2 = static_cast<int32>(3);",
        ])
        assert (
            "m_out_data(m_dims_0, m_dims_1, m_dims_2) = m_cv[m_dims_0](m_dims_1, m_dims_2);"
        ) in render(conversion.body)
        assert [e.render() for e in conversion.shape] == [
            "m_dims_size_0", "m_dims_size_1", "m_dims_size_2",
        ]
        assert [e.render() for e in conversion.empty_shape] == ["0", "3", "3"]

    def test_vector_of_mat_multichannel(self) -> None:
        conversion = synthesize("a", classify_shape(["vector:none", "none", "none", "CV_8UC3"]),
                                Direction.CV_TO_TENSOR)
        assert render(conversion.sizes) == "\n".join([
            "const int32 a_dims_size_0 = static_cast<int32>(a_cv.size());",
            "const int32 a_dims_size_1 = static_cast<int32>(a_cv[0].size[0]);",
            "const int32 a_dims_size_2 = static_cast<int32>(a_cv[0].size[1]);",
        ])
        body = render(conversion.body)
        for channel in range(3):
            assert (
                f"a_out_data(a_dims_0, a_dims_1, a_dims_2, {channel}) = "
                f"a_cv[a_dims_0].at<Vec<uint8_t, 3>>(a_dims_1, a_dims_2)[{channel}];"
            ) in body
        assert "[3]" not in body
        assert _loop_depth(conversion.body) == 3

    def test_empty_shape_keeps_channels(self) -> None:
        conversion = synthesize("a", classify_shape(["vector:none", "none", "none", "CV_8UC3"]),
                                Direction.CV_TO_TENSOR)
        assert [e.render() for e in conversion.empty_shape] == ["0", "0", "0", "3"]
        assert [e.render() for e in conversion.shape][-1] == "3"

    def test_no_early_stop_on_output(self) -> None:
        conversion = synthesize("a", classify_shape(["vector:none", "vector:none", "double"]),
                                Direction.CV_TO_TENSOR)
        assert "isnan" not in render(conversion.body)
        assert not any(isinstance(s, If) for s in conversion.body)


class TestNaming:
    """Identifiers derive from the port name."""

    @pytest.mark.parametrize("tokens", [
        ["none", "CV_8U"], ["vector:none", "float"], ["vector:none", "2", "CV_16U"],
    ])
    def test_port_prefix(self, tokens) -> None:
        for direction in Direction:
            text = _text(tokens, direction, name="left_image")
            assert "left_image_cv" in text
            assert "left_image_dims_size_0" in text
