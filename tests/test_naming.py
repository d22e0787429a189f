"""Tests for identifier casing transforms."""

from hubgen.utils.naming import MethodStyle, NamingStyle, split_words


def test_split_words():
    assert split_words("UserDTOList") == ["User", "DTO", "List"]
    assert split_words("send_message_async") == ["send", "message", "async"]


def test_method_styles():
    assert MethodStyle.CAMEL_CASE.transform("SendAsync") == "sendAsync"
    assert MethodStyle.PASCAL_CASE.transform("sendAsync") == "SendAsync"
    assert MethodStyle.NONE.transform("SendAsync") == "SendAsync"


def test_naming_styles():
    assert NamingStyle.CAMEL_CASE.transform("UserDto") == "userDto"
    assert NamingStyle.PASCAL_CASE.transform("userDto") == "UserDto"
    assert NamingStyle.SNAKE_CASE.transform("UserDto") == "user_dto"
    assert NamingStyle.NONE.transform("UserDto") == "UserDto"


def test_transforms_accept_empty_names():
    for style in NamingStyle:
        assert style.transform("") == ""
