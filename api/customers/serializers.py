"""
Serializers for the Spanish customer form endpoints.
"""

from rest_framework import serializers

# Spanish form field -> contact field
FIELD_MAP = {
    "nombre": "first_name",
    "correo_electronico": "email",
    "telefono": "phone",
    "empresa": "company_name",
    "notas": "notes",
}


class CustomerRequestSerializer(serializers.Serializer):
    nombre = serializers.CharField(
        min_length=2,
        max_length=100,
        error_messages={
            "required": "El nombre es requerido y debe tener al menos 2 caracteres",
            "min_length": "El nombre es requerido y debe tener al menos 2 caracteres",
        },
    )
    correo_electronico = serializers.EmailField(
        required=False,
        allow_blank=True,
        allow_null=True,
        error_messages={"invalid": "El correo electrónico no es válido"},
    )
    telefono = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    empresa = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    estado = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notas = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_contact_data(self) -> dict:
        """Validated form values renamed to contact fields; blanks are dropped."""
        data = {}
        for name, field in FIELD_MAP.items():
            value = self.validated_data.get(name)
            if value:
                data[field] = value.lower() if field == "email" else value
        return data


class CustomerUpdateRequestSerializer(CustomerRequestSerializer):
    nombre = serializers.CharField(required=False, min_length=2, max_length=100)
