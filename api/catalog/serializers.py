"""
Serializers for client, product and license endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import LICENSE_STATUS_LABELS, LICENSE_TYPE_LABELS


class ClientRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    company = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)


class ClientUpdateRequestSerializer(ClientRequestSerializer):
    name = serializers.CharField(required=False, max_length=255)
    email = serializers.EmailField(required=False)


class ClientSerializer(serializers.Serializer):
    """Serializer for Client."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.CharField()
    phone = serializers.CharField(allow_null=True)
    company = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()


class ProductRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price_one_payment = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    price_subscription = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class ProductUpdateRequestSerializer(ProductRequestSerializer):
    name = serializers.CharField(required=False, max_length=255)
    price_one_payment = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )
    price_subscription = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )


class ProductSerializer(serializers.Serializer):
    """Serializer for Product."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    price_one_payment = serializers.DecimalField(max_digits=12, decimal_places=2)
    price_subscription = serializers.DecimalField(max_digits=12, decimal_places=2)
    created_at = serializers.DateTimeField()


class LicenseRequestSerializer(serializers.Serializer):
    client_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    type = serializers.CharField()
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.CharField(required=False)


class LicenseUpdateRequestSerializer(serializers.Serializer):
    type = serializers.CharField(required=False)
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.CharField(required=False)


class LicenseStatusRequestSerializer(serializers.Serializer):
    status = serializers.CharField()


class LicenseSerializer(serializers.Serializer):
    """Serializer for License."""

    id = serializers.UUIDField()
    client_id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    type = serializers.CharField()
    type_label = serializers.SerializerMethodField()
    status = serializers.CharField()
    status_label = serializers.SerializerMethodField()
    start_date = serializers.DateField()
    end_date = serializers.DateField(allow_null=True)
    stripe_subscription_id = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_type_label(self, obj) -> str:
        return LICENSE_TYPE_LABELS[obj.type]

    def get_status_label(self, obj) -> str:
        return LICENSE_STATUS_LABELS[obj.status]


class LicenseFullSerializer(serializers.Serializer):
    """Serializer for the joined LicenseFull read model."""

    license = LicenseSerializer()
    client_name = serializers.CharField()
    client_email = serializers.CharField()
    client_company = serializers.CharField(allow_null=True)
    product_name = serializers.CharField()
    product_description = serializers.CharField(allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_expired = serializers.BooleanField()


class ClientWithLicensesSerializer(serializers.Serializer):
    client = ClientSerializer()
    licenses = LicenseFullSerializer(many=True)
