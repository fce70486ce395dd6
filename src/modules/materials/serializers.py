"""Material company DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.materials.models import MaterialCompany


class CreateMaterialCompanySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    contact_person = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.CharField(max_length=254, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    website = serializers.URLField(max_length=255, required=False, allow_blank=True)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class UpdateMaterialCompanySerializer(CreateMaterialCompanySerializer):
    name = serializers.CharField(max_length=150, required=False)


class ReorderMaterialCompaniesSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class MaterialCompanySerializer(serializers.ModelSerializer):
    """Read serializer for the MaterialCompany resource."""

    class Meta:
        model = MaterialCompany
        fields = [
            "id",
            "name",
            "contact_person",
            "phone",
            "email",
            "address",
            "website",
            "tax_rate",
            "notes",
            "sort_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
