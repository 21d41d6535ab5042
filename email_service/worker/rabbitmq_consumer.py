import json
import logging
import time

import pika
from django.conf import settings

from .models import Success
from .serializers import JobPayloadSerializer
from .services import build_job_processor

logger = logging.getLogger(__name__)


def connect_rabbitmq(url, retry_delay=5, max_retries=5):
    for attempt in range(1, max_retries + 1):
        try:
            return pika.BlockingConnection(pika.URLParameters(url))
        except pika.exceptions.AMQPConnectionError as e:
            logger.error(f"RabbitMQ connection failed (attempt {attempt}/{max_retries}): {e}")
            if attempt < max_retries:
                time.sleep(retry_delay)
    raise ConnectionError("Failed to connect to RabbitMQ after multiple attempts.")


class EmailConsumer:
    # Relays jobs from email.queue to the JobProcessor and turns each outcome
    # into ack, retry or dead-letter

    def __init__(self, processor=None, transport=None):
        self.processor = processor or build_job_processor(transport=transport)
        self.transport = transport or self.processor.transport
        self.rabbitmq_url = settings.RABBITMQ_URL
        self.exchange_name = settings.EMAIL_EXCHANGE
        self.queue_name = settings.EMAIL_QUEUE
        self.failed_queue = settings.FAILED_QUEUE
        self.max_retries = settings.EMAIL_MAX_RETRIES
        self.connection = None
        self.channel = None

    def connect(self):
        """Establish connection to RabbitMQ"""
        try:
            self.connection = connect_rabbitmq(self.rabbitmq_url)
            self.channel = self.connection.channel()

            self.channel.exchange_declare(exchange=self.exchange_name, exchange_type='direct', durable=True)
            for queue in (self.queue_name, self.failed_queue):
                self.channel.queue_declare(queue=queue, durable=True)
                self.channel.queue_bind(exchange=self.exchange_name, queue=queue, routing_key=queue)

            logger.info("Connected to RabbitMQ for email processing")
            return True
        except Exception as e:
            logger.error(f"Failed to connect to RabbitMQ: {e}")
            return False

    def process_message(self, ch, method, properties, body):
        """Run one queued job through the pipeline"""
        try:
            try:
                payload = json.loads(body)
            except (TypeError, ValueError) as e:
                logger.error(f"Discarding undecodable email job: {e}")
                self.publish(ch, self.failed_queue, {'raw': _as_text(body), 'error': 'Invalid JSON payload'})
                ch.basic_ack(delivery_tag=method.delivery_tag)
                return

            serializer = JobPayloadSerializer(data=payload if isinstance(payload, dict) else {})
            if not serializer.is_valid():
                logger.error(f"Discarding invalid email job: {serializer.errors}")
                self.publish(ch, self.failed_queue, {'payload': payload, 'error': serializer.errors})
                ch.basic_ack(delivery_tag=method.delivery_tag)
                return

            job = serializer.to_job()
            logger.info(f"Processing email job: {job.request_id} (retry_count={job.retry_count})")
            outcome = self.processor.process(job)

            if not isinstance(outcome, Success):
                self.handle_failure(ch, payload, job, outcome.error)

            ch.basic_ack(delivery_tag=method.delivery_tag)

        except Exception as e:
            logger.error(f"Error processing email message: {e}")
            # Reject and requeue for retry
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=True)

    def handle_failure(self, ch, payload, job, error):
        """Retry through the queue until EMAIL_MAX_RETRIES, then dead-letter"""
        next_attempt = job.retry_count + 1
        if next_attempt < self.max_retries:
            logger.warning(f"Requeueing email job {job.request_id} (attempt {next_attempt + 1}/{self.max_retries})")
            self.publish(ch, self.queue_name, dict(payload, retry_count=next_attempt))
        else:
            logger.error(f"Email job {job.request_id} moved to {self.failed_queue} after {next_attempt} attempts")
            self.publish(ch, self.failed_queue, dict(payload, retry_count=job.retry_count, error=error))

    def publish(self, ch, routing_key, message):
        ch.basic_publish(
            exchange=self.exchange_name,
            routing_key=routing_key,
            body=json.dumps(message),
            properties=pika.BasicProperties(
                delivery_mode=2,
                content_type='application/json'
            )
        )

    def start_consuming(self):
        """Start consuming messages from the queue"""
        if self.transport.verify():
            logger.info("Email transporter is ready")
        else:
            logger.warning("Email transporter is not reachable, consuming anyway")

        if not self.connect():
            return

        self.channel.basic_qos(prefetch_count=1)
        self.channel.basic_consume(queue=self.queue_name, on_message_callback=self.process_message)

        logger.info("Starting email consumer...")
        try:
            self.channel.start_consuming()
        except KeyboardInterrupt:
            logger.info("Stopping email consumer...")
            self.channel.stop_consuming()
        finally:
            if self.connection and not self.connection.is_closed:
                self.connection.close()


def _as_text(body):
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return str(body)
