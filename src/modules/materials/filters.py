import django_filters

from modules.materials.models import MaterialCompany


class MaterialCompanyFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = MaterialCompany
        fields = ["name"]
