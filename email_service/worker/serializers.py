from rest_framework import serializers

from .models import Job


class JobPayloadSerializer(serializers.Serializer):
    # Shape of a message on email.queue; unknown fields are ignored
    request_id = serializers.CharField(max_length=150)
    user_id = serializers.CharField(max_length=150)
    notification_type = serializers.CharField(max_length=150)
    message_data = serializers.DictField(required=False, default=dict)
    retry_count = serializers.IntegerField(required=False, default=0, min_value=0)
    channel_priority = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    metadata = serializers.DictField(required=False, default=dict)

    def to_job(self) -> Job:
        data = self.validated_data
        return Job(
            request_id=data['request_id'],
            user_id=data['user_id'],
            notification_type=data['notification_type'],
            message_data=dict(data['message_data']),
            retry_count=data['retry_count'],
            channel_priority=data['channel_priority'],
            metadata=dict(data['metadata']),
        )


class TrackingRecordSerializer(serializers.Serializer):
    request_id = serializers.CharField()
    user_id = serializers.CharField()
    email = serializers.CharField(required=False)
    message_id = serializers.CharField(required=False)
    sent_at = serializers.CharField(required=False)
    error = serializers.CharField(required=False)
    retry_count = serializers.IntegerField(required=False)
    failed_at = serializers.CharField(required=False)
