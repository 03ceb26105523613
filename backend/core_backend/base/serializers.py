from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer for every model serializer in the project.

    Money fields are plain integers in minor units; nothing here converts
    them to decimals.
    """

    def validate(self, data):
        data = super().validate(data)
        return data


class TimestampedSerializer(BaseModelSerializer):
    """Serializer for models carrying created_at / updated_at."""

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
