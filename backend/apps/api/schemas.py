from rest_framework import serializers

from .envelope import STATUS_FAILED, STATUS_SUCCESS


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)
    extra = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


class CommonApiResponseSerializer(serializers.Serializer):
    """
    Base for response bodies that embed a ResponseEnvelope.

    The serialized instance exposes the envelope under ``.envelope``; its
    fields are flattened into the top level of the payload.
    """

    status = serializers.ChoiceField(
        choices=[STATUS_SUCCESS, STATUS_FAILED], source="envelope.status"
    )
    message = serializers.CharField(source="envelope.message", allow_blank=True)
