from django.core.management.base import BaseCommand
from worker.rabbitmq_consumer import EmailConsumer


class Command(BaseCommand):
    help = 'Start consuming email jobs from RabbitMQ'

    def add_arguments(self, parser):
        parser.add_argument(
            '--max-retries',
            type=int,
            default=None,
            help='Deliveries per job before it is moved to the failed queue (default: EMAIL_MAX_RETRIES)',
        )

    def handle(self, *args, **options):
        consumer = EmailConsumer()
        if options['max_retries'] is not None:
            consumer.max_retries = options['max_retries']

        self.stdout.write(self.style.SUCCESS(
            f"Starting email consumer on {consumer.queue_name} (max retries: {consumer.max_retries})..."
        ))
        consumer.start_consuming()
