from pushwire.notifications.model import Notification
from pushwire.notifications.trim import escaped_size, truncate_text


def test_trim_noop_when_payload_fits() -> None:
    notification = Notification().set_alert_text("hello")

    assert notification.trim(100) == 0
    assert notification.alert == "hello"


def test_trim_removes_excess_characters() -> None:
    notification = Notification().set_alert_text("a" * 100)

    removed = notification.trim(110)

    assert removed == 10
    assert notification.alert == "a" * 90
    assert notification.length() == 110


def test_trim_structured_alert_keeps_other_fields() -> None:
    notification = Notification().set_alert_text("b" * 50).set_alert_title("T")

    removed = notification.trim(60)

    assert removed == 31
    assert notification.alert.title == "T"
    assert notification.alert_text == "b" * 19
    assert notification.length() == 60


def test_trim_at_word_boundary_backs_up_to_previous_space() -> None:
    notification = Notification().set_alert_text("hello world again")
    notification.truncate_at_word_boundary = True

    removed = notification.trim(33)

    assert removed == 6
    assert notification.alert == "hello world"


def test_trim_at_word_boundary_keeps_cut_on_space() -> None:
    notification = Notification().set_alert_text("hello world again")
    notification.truncate_at_word_boundary = True

    assert notification.trim(31) == 6
    assert notification.alert == "hello world"


def test_trim_reports_remaining_excess_when_body_too_short() -> None:
    notification = Notification({"data": "x" * 100}).set_alert_text("hi")

    assert notification.trim(50) == -80
    assert notification.alert == "hi"


def test_trim_without_alert_reports_full_excess() -> None:
    notification = Notification({"data": "x" * 100})

    assert notification.trim(100) == -11


def test_trim_counts_escaped_characters() -> None:
    notification = Notification().set_alert_text("\n" * 10)

    assert notification.trim(30) == 5
    assert notification.length() == 30


def test_trim_counts_multibyte_characters() -> None:
    notification = Notification().set_alert_text("é" * 10)

    assert notification.trim(35) == 3
    assert notification.length() == 34


def test_trim_after_compile_leaves_body_frozen() -> None:
    notification = Notification().set_alert_text("a" * 100)
    body = notification.compile()

    assert notification.trim(110) == -10
    assert notification.alert == "a" * 100
    assert notification.compile() == body


def test_trim_defaults_to_configured_budget(small_budget_settings) -> None:
    notification = Notification().set_alert_text("one two three four five six seven eight nine ten eleven")

    removed = notification.trim()

    assert removed > 0
    assert notification.length() <= small_budget_settings.max_payload_bytes
    assert not notification.alert.endswith(" ")


def test_escaped_size() -> None:
    assert escaped_size("abc", "utf-8") == 3
    assert escaped_size('"', "utf-8") == 2
    assert escaped_size("é", "utf-8") == 2


def test_truncate_text_without_whitespace_at_word_boundary() -> None:
    assert truncate_text("abcdef", 2, "utf-8") == "abcd"
    assert truncate_text("abcdef", 2, "utf-8", at_word_boundary=True) == ""


def test_trim_with_text_mdm_leaves_alert_untouched() -> None:
    notification = Notification().set_alert_text("a" * 500).set_mdm("m" * 200)

    assert notification.trim(50) == -160
    assert notification.alert == "a" * 500
    assert notification.length() == 210


def test_trim_after_compile_returns_zero_when_body_fits() -> None:
    notification = Notification().set_alert_text("hello")
    notification.compile()

    assert notification.trim(100) == 0
    assert notification.alert == "hello"
