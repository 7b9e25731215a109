import django_filters as filters

from properties.models import Property


class PropertyFilter(filters.FilterSet):
    realtor = filters.NumberFilter(field_name="realtor_id")
    city = filters.CharFilter(field_name="city", lookup_expr="iexact")

    class Meta:
        model = Property
        fields = ["realtor", "city", "property_type", "is_featured"]
