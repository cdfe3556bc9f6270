from rest_framework import serializers

from .models import BusinessPartner


class BusinessPartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessPartner
        fields = ['id', 'bp_code', 'name', 'type', 'phone', 'email', 'address', 'tin_id', 'contact_person',
                  'payment_terms', 'credit_limit', 'created_at', 'updated_at']

    def validate_credit_limit(self, value):
        if value < 0:
            raise serializers.ValidationError("Credit limit cannot be negative")
        return value
