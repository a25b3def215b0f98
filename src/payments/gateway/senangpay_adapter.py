"""SenangPay hosted payment page.

The gateway expects a browser form POST carrying the signed parameters, so
the redirect is a self-submitting HTML form.
"""

from html import escape

from payments.gateway.port import PaymentGateway, PaymentInitiation, PaymentRedirect
from shared.session import SessionContext

_FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<body onload="document.forms[0].submit()">
<form method="POST" action="{action}">
{fields}
<noscript><button type="submit">Continue to payment</button></noscript>
</form>
</body>
</html>
"""


def auto_post_form(action: str, params: dict) -> str:
    fields = "\n".join(
        f'<input type="hidden" name="{escape(str(name))}" value="{escape("" if value is None else str(value))}">'
        for name, value in params.items()
    )
    return _FORM_TEMPLATE.format(action=escape(action), fields=fields)


class SenangPayGateway(PaymentGateway):
    mode = "senangpay"

    def redirect(self, initiation: PaymentInitiation, session: SessionContext) -> PaymentRedirect:  # noqa: ARG002
        return PaymentRedirect(
            url=initiation.payment_url,
            method="POST",
            form_html=auto_post_form(initiation.payment_url, initiation.params),
        )
