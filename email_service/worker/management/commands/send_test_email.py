from django.core.management.base import BaseCommand

from worker.exceptions import DispatchError
from worker.models import Failure, Success
from worker.transport import SmtpTransport

TEST_SUBJECT = 'Test Email from Notification Service'
TEST_BODY = '<h1>Test Email</h1><p>If you received this, your email service is working!</p>'


def send_test_email(to, transport=None):
    transport = transport or SmtpTransport()
    try:
        return Success(transport.send(to=to, subject=TEST_SUBJECT, html=TEST_BODY))
    except DispatchError as e:
        return Failure(str(e))


class Command(BaseCommand):
    help = 'Send a fixed test message through the SMTP transport'

    def add_arguments(self, parser):
        parser.add_argument('to', help='Recipient address')

    def handle(self, *args, **options):
        outcome = send_test_email(options['to'])
        if outcome.success:
            self.stdout.write(self.style.SUCCESS(f"Test email sent: {outcome.message_id}"))
        else:
            self.stdout.write(self.style.ERROR(f"Test email failed: {outcome.error}"))
