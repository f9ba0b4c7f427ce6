"""Unit tests for the service layer: verifier, key settings, widget markup."""

from unittest.mock import AsyncMock

import pytest

from config import RecaptchaSettings
from errors import (
    CaptchaMissingError,
    CaptchaRejectedError,
    CaptchaTransportError,
    InvalidFormError,
)
from infrastructure.options.memory import InMemoryOptionStore
from schemas.dto.requests.comment import COMMENT_NONCE_FIELD, CommentSubmission
from services.captcha_settings import (
    SECRET_KEY_OPTION,
    SITE_KEY_OPTION,
    CaptchaKeys,
    CaptchaSettingsService,
)
from services.submission_verifier import COMMENT_FORM_ACTION, SubmissionVerifier
from services.widget import render_nonce_field, render_script_tag, render_widget
from shared.nonce import NonceManager


# ── Helpers ───────────────────────────────────────────────────────────────────


def _submission(**overrides) -> CommentSubmission:
    base = dict(post_id=42, content="Nice post!", author="Reader")
    base.update(overrides)
    return CommentSubmission(**base)


def _keys(secret_key="configured-secret"):
    return AsyncMock(return_value=CaptchaKeys(site_key="site", secret_key=secret_key))


def _verifier(provider_result=True, secret_key="configured-secret"):
    nonces = NonceManager("test-secret")
    provider = AsyncMock()
    if isinstance(provider_result, BaseException):
        provider.verify.side_effect = provider_result
    else:
        provider.verify.return_value = provider_result
    keys = _keys(secret_key)
    return SubmissionVerifier(nonces, provider, keys), nonces, provider, keys


# ── SubmissionVerifier ────────────────────────────────────────────────────────


class TestSubmissionVerifier:
    @pytest.mark.parametrize("nonce", [None, "", "forged-nonce"])
    async def test_invalid_nonce_fails_without_network(self, nonce):
        verifier, _, provider, keys = _verifier()
        with pytest.raises(InvalidFormError):
            await verifier.verify(
                _submission(), nonce=nonce, captcha_response="valid-token-abc"
            )
        provider.verify.assert_not_called()
        keys.assert_not_called()

    async def test_nonce_for_other_action_fails(self):
        verifier, nonces, provider, _ = _verifier()
        with pytest.raises(InvalidFormError):
            await verifier.verify(
                _submission(),
                nonce=nonces.create("captcha_settings"),
                captcha_response="valid-token-abc",
            )
        provider.verify.assert_not_called()

    @pytest.mark.parametrize("captcha_response", [None, "", "   ", "<b></b>"])
    async def test_missing_captcha_fails_without_network(self, captcha_response):
        verifier, nonces, provider, _ = _verifier()
        with pytest.raises(CaptchaMissingError):
            await verifier.verify(
                _submission(),
                nonce=nonces.create(COMMENT_FORM_ACTION),
                captcha_response=captcha_response,
            )
        provider.verify.assert_not_called()

    async def test_success_returns_same_submission(self):
        verifier, nonces, _, _ = _verifier(provider_result=True)
        submission = _submission()
        result = await verifier.verify(
            submission,
            nonce=nonces.create(COMMENT_FORM_ACTION),
            captcha_response="valid-token-abc",
        )
        assert result is submission
        assert result == _submission()

    async def test_one_call_with_configured_secret_and_token(self):
        verifier, nonces, provider, _ = _verifier()
        await verifier.verify(
            _submission(),
            nonce=nonces.create(COMMENT_FORM_ACTION),
            captcha_response="valid-token-abc",
        )
        provider.verify.assert_awaited_once_with(
            "valid-token-abc", secret="configured-secret"
        )

    async def test_token_is_sanitized_before_sending(self):
        verifier, nonces, provider, _ = _verifier()
        await verifier.verify(
            _submission(),
            nonce=nonces.create(COMMENT_FORM_ACTION),
            captcha_response="  valid-token-abc\n",
        )
        assert provider.verify.await_args.args[0] == "valid-token-abc"

    async def test_rejected_by_provider(self):
        verifier, nonces, _, _ = _verifier(provider_result=False)
        with pytest.raises(CaptchaRejectedError):
            await verifier.verify(
                _submission(),
                nonce=nonces.create(COMMENT_FORM_ACTION),
                captcha_response="valid-token-abc",
            )

    async def test_transport_failure_propagates_as_rejection(self):
        verifier, nonces, _, _ = _verifier(provider_result=CaptchaTransportError())
        with pytest.raises(CaptchaRejectedError) as excinfo:
            await verifier.verify(
                _submission(),
                nonce=nonces.create(COMMENT_FORM_ACTION),
                captcha_response="valid-token-abc",
            )
        assert isinstance(excinfo.value, CaptchaTransportError)

    async def test_missing_secret_rejects_without_network(self):
        verifier, nonces, provider, _ = _verifier(secret_key="")
        with pytest.raises(CaptchaRejectedError):
            await verifier.verify(
                _submission(),
                nonce=nonces.create(COMMENT_FORM_ACTION),
                captcha_response="valid-token-abc",
            )
        provider.verify.assert_not_called()

    async def test_no_caching_between_calls(self):
        verifier, nonces, provider, _ = _verifier()
        provider.verify.side_effect = [True, False]
        nonce = nonces.create(COMMENT_FORM_ACTION)
        await verifier.verify(
            _submission(), nonce=nonce, captcha_response="valid-token-abc"
        )
        with pytest.raises(CaptchaRejectedError):
            await verifier.verify(
                _submission(), nonce=nonce, captcha_response="valid-token-abc"
            )
        assert provider.verify.await_count == 2

    async def test_secret_is_read_on_every_call(self):
        verifier, nonces, provider, keys = _verifier()
        nonce = nonces.create(COMMENT_FORM_ACTION)
        for _ in range(2):
            await verifier.verify(_submission(), nonce=nonce, captcha_response="t")
        assert keys.await_count == 2


# ── CaptchaSettingsService ────────────────────────────────────────────────────


class TestCaptchaSettingsService:
    async def test_defaults_used_when_store_empty(self):
        defaults = RecaptchaSettings(
            recaptcha_site_key="env-site", recaptcha_secret_key="env-secret"
        )
        service = CaptchaSettingsService(InMemoryOptionStore(), defaults)
        keys = await service.get_keys()
        assert keys == CaptchaKeys(site_key="env-site", secret_key="env-secret")

    async def test_stored_values_win_over_defaults(self):
        defaults = RecaptchaSettings(
            recaptcha_site_key="env-site", recaptcha_secret_key="env-secret"
        )
        store = InMemoryOptionStore(
            {SITE_KEY_OPTION: "stored-site", SECRET_KEY_OPTION: "stored-secret"}
        )
        keys = await CaptchaSettingsService(store, defaults).get_keys()
        assert keys.site_key == "stored-site"
        assert keys.secret_key == "stored-secret"

    async def test_saved_empty_value_is_not_replaced_by_default(self):
        defaults = RecaptchaSettings(recaptcha_secret_key="env-secret")
        service = CaptchaSettingsService(InMemoryOptionStore(), defaults)
        await service.save_keys("site", "")
        assert (await service.get_keys()).secret_key == ""

    async def test_save_sanitizes_and_persists(self):
        store = InMemoryOptionStore()
        service = CaptchaSettingsService(store, RecaptchaSettings())
        keys = await service.save_keys(" <b>site</b>\n", "secret\tkey ")
        assert keys == CaptchaKeys(site_key="site", secret_key="secret key")
        assert await store.get(SITE_KEY_OPTION) == "site"
        assert await store.get(SECRET_KEY_OPTION) == "secret key"

    @pytest.mark.parametrize(
        "site_key, secret_key, expected",
        [("a", "b", True), ("a", "", False), ("", "b", False)],
    )
    def test_is_configured(self, site_key, secret_key, expected):
        assert CaptchaKeys(site_key, secret_key).is_configured is expected


# ── Widget markup ─────────────────────────────────────────────────────────────


class TestWidget:
    def test_script_tag(self):
        tag = render_script_tag("https://www.google.com/recaptcha/api.js")
        assert str(tag) == (
            '<script src="https://www.google.com/recaptcha/api.js" async defer></script>'
        )

    def test_widget_contains_site_key_and_valid_nonce(self):
        nonces = NonceManager("test-secret")
        html = str(render_widget("6LcSiteKey", nonces))
        assert '<div class="g-recaptcha" data-sitekey="6LcSiteKey"></div>' in html
        nonce = nonces.create(COMMENT_FORM_ACTION)
        assert f'name="{COMMENT_NONCE_FIELD}" value="{nonce}"' in html

    def test_site_key_is_escaped(self):
        html = str(render_widget('"><script>x</script>', NonceManager("s")))
        assert "<script>" not in html
        assert "&#34;&gt;&lt;script&gt;" in html

    def test_nonce_field(self):
        assert str(render_nonce_field("f", "abc")) == (
            '<input type="hidden" id="f" name="f" value="abc" />'
        )
