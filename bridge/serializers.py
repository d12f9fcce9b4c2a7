from rest_framework import serializers


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=2000, required=False, allow_blank=True, trim_whitespace=True)


class BookingSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    doctorId = serializers.CharField(max_length=64, required=False, allow_blank=True)
    doctorName = serializers.CharField(max_length=100, required=False, allow_blank=True)
    specialty = serializers.CharField(max_length=100, required=False, allow_blank=True)
    date = serializers.DateField()
    time = serializers.TimeField(required=False, allow_null=True)
    type = serializers.CharField(max_length=32, required=False, allow_blank=True)
