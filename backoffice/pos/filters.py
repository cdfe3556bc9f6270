import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(method='filter_status')
    table = django_filters.NumberFilter(field_name='table_id')
    is_posted = django_filters.BooleanFilter()
    order_type = django_filters.CharFilter(field_name='order_type', lookup_expr='iexact')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Order
        fields = ['status', 'table', 'is_posted', 'order_type']

    def filter_status(self, queryset, name, value):
        """Comma separated statuses, e.g. ``OPEN,PREPARING``"""
        statuses = [status.strip().upper() for status in value.split(',') if status.strip()]
        return queryset.filter(status__in=statuses) if statuses else queryset
