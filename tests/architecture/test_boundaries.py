from pytest_archon import archrule


def test_otp_independence() -> None:
    """
    One-time code components are leaves of the package.
    They must not know about the orchestrator that drives them.
    """
    (
        archrule("otp_is_independent")
        .match("trusted_signin.otp*")
        .should_not_import("trusted_signin.orchestrator*")
        .should_not_import("trusted_signin.device*")
        .should_not_import("trusted_signin.factory")
        .check("trusted_signin")
    )


def test_device_independence() -> None:
    """
    Device trust and step-up are leaves of the package.
    They must not import the orchestrator or the OTP components.
    """
    (
        archrule("device_is_independent")
        .match("trusted_signin.device*")
        .should_not_import("trusted_signin.orchestrator*")
        .should_not_import("trusted_signin.otp*")
        .should_not_import("trusted_signin.factory")
        .check("trusted_signin")
    )


def test_ports_layering() -> None:
    """
    Ports (interfaces) should not depend on Adapters (implementations).
    """
    (
        archrule("ports_layering")
        .match("trusted_signin.ports")
        .should_not_import("trusted_signin.device*")
        .should_not_import("trusted_signin.otp*")
        .should_not_import("trusted_signin.orchestrator*")
        .check("trusted_signin")
    )


def test_exceptions_isolation() -> None:
    """
    Exceptions are the lowest level.
    They must not import any other module of the package.
    """
    (
        archrule("exceptions_isolation")
        .match("trusted_signin.exceptions")
        .should_not_import("trusted_signin.*")
        .check("trusted_signin")
    )


def test_config_isolation() -> None:
    """
    Configuration is plain data and depends on nothing in the package.
    """
    (
        archrule("config_isolation")
        .match("trusted_signin.config")
        .should_not_import("trusted_signin.*")
        .check("trusted_signin")
    )


def test_observability_layering() -> None:
    """
    Observability helpers are used by every component and depend on none.
    """
    (
        archrule("observability_layering")
        .match("trusted_signin.observability*")
        .should_not_import("trusted_signin.otp*")
        .should_not_import("trusted_signin.device*")
        .should_not_import("trusted_signin.orchestrator*")
        .check("trusted_signin")
    )
