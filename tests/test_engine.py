from engine import Calculator
from contracts import CalculationRequest, CalculationType


def test_precedence_payload():
    payload = Calculator().calculate_payload({"expression": "2 + 3 * 4", "type": "basic"})

    assert payload["success"] is True
    assert payload["result"] == 14
    assert payload["expression"] == "2 + 3 * 4"
    assert payload["steps"] == ["3 * 4 = 12", "2 + 12 = 14"]
    assert payload["formatted_result"] == "14"
    assert "error" not in payload


def test_scientific_composition_payload():
    payload = Calculator().calculate_payload(
        {"expression": "sqrt(16) + log(100)", "type": "scientific"}
    )

    assert payload["result"] == 6
    assert payload["steps"] == ["sqrt(16) = 4", "log(100) = 2", "4 + 2 = 6"]


def test_division_by_zero_payload():
    payload = Calculator().calculate_payload({"expression": "10 / 0", "type": "basic"})

    assert payload == {
        "success": False,
        "error": {"kind": "EvalError", "message": "division by zero", "position": 3},
    }


def test_unbalanced_parentheses_payload():
    payload = Calculator().calculate_payload({"expression": "(2 + 3", "type": "basic"})

    assert payload["success"] is False
    assert payload["error"]["kind"] == "ParseError"
    assert payload["error"]["message"] == "unbalanced parentheses"
    assert payload["error"]["position"] == 0
    assert "result" not in payload


def test_restricted_registry_payload():
    calculator = Calculator()

    basic = calculator.calculate_payload({"expression": "sin(0)", "type": "basic"})
    scientific = calculator.calculate_payload({"expression": "sin(0)", "type": "scientific"})

    assert basic["error"]["kind"] == "ParseError"
    assert basic["error"]["message"] == "unknown identifier 'sin'"
    assert scientific["success"] is True
    assert scientific["result"] == 0


def test_lex_error_payload():
    payload = Calculator().calculate_payload({"expression": "2 # 3"})

    assert payload["error"] == {
        "kind": "LexError",
        "message": "unexpected character '#'",
        "position": 2,
    }


def test_invalid_request_mapping_becomes_failure():
    calculator = Calculator()

    missing = calculator.calculate_payload({"type": "basic"})
    bad_type = calculator.calculate_payload({"expression": "1", "type": "advanced"})

    assert missing["success"] is False
    assert missing["error"]["kind"] == "ParseError"
    assert "'expression'" in missing["error"]["message"]
    assert "'type'" in bad_type["error"]["message"]


def test_expression_length_limit():
    calculator = Calculator(max_expression_length=10)

    response = calculator.calculate("1 + 1 + 1 + 1")

    assert response.success is False
    assert response.error.message == "expression too long"


def test_flat_chain_at_length_limit_evaluates():
    calculator = Calculator()
    expression = "+".join(["1"] * 500)   # 999 characters

    response = calculator.calculate(expression)

    assert response.success is True
    assert response.result == 500
    assert len(response.steps) == 499
    assert response.steps[-1] == "499 + 1 = 500"


def test_flat_product_chain_keeps_left_to_right_steps():
    calculator = Calculator()

    response = calculator.calculate("*".join(["2"] * 400))

    assert response.success is True
    assert response.result == 2.0 ** 400
    assert response.steps[0] == "2 * 2 = 4"


def test_invalid_enum_arguments_become_failures():
    calculator = Calculator()

    bad_type = calculator.calculate("1 + 1", "advanced")
    bad_angle = calculator.calculate("1 + 1", CalculationType.SCIENTIFIC, "grad")

    assert bad_type.success is False
    assert bad_type.error.kind == "ParseError"
    assert "'type'" in bad_type.error.message
    assert bad_angle.success is False
    assert "'angle_unit'" in bad_angle.error.message


def test_string_enum_arguments_are_accepted():
    response = Calculator().calculate("sin(90)", "scientific", "deg")

    assert response.success is True
    assert response.result == 1


def test_non_text_expression_becomes_failure():
    response = Calculator().calculate(12)

    assert response.success is False
    assert "'expression'" in response.error.message


def test_non_mapping_payload_becomes_failure():
    calculator = Calculator()

    for payload in (["expression", "1 + 1"], "1 + 1", None):
        result = calculator.calculate_payload(payload)
        assert result == {
            "success": False,
            "error": {"kind": "ParseError", "message": "invalid request: expected a mapping"},
        }


def test_same_expression_twice_is_identical():
    calculator = Calculator()

    first = calculator.run("sqrt(2) ^ 2 - 10 % 4", CalculationType.SCIENTIFIC)
    second = calculator.run("sqrt(2) ^ 2 - 10 % 4", CalculationType.SCIENTIFIC)

    assert first == second


def test_trace_and_hidden_steps():
    calculator = Calculator()

    traced = calculator.handle(CalculationRequest(expression="1 + 2", trace=True))
    quiet = calculator.handle(CalculationRequest(expression="1 + 2", show_steps=False))

    assert traced.trace[-1].value == traced.result
    assert traced.to_payload()["trace"] == [
        {"description": "1 + 2 = 3", "expression": "3", "value": 3.0}
    ]
    assert quiet.steps == []
    assert "trace" not in quiet.to_payload()


def test_display_precision():
    response = Calculator(display_precision=4).calculate("2 / 3")

    assert response.formatted_result == "0.6667"
    assert response.steps == ["2 / 3 = 0.6667"]
    assert response.result == 2 / 3
