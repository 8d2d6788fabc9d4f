from django.db.models import Q

from shared.viewsets import AuditedModelViewSet

from ..models import Customer
from ..serializers.customer_serializers import CustomerSerializer


class CustomerViewSet(AuditedModelViewSet):
    serializer_class = CustomerSerializer
    entity_type = "Customer"
    results_key = "customers"
    total_key = "totalCustomers"

    def get_queryset(self):
        qs = Customer.objects.all().order_by("name")
        search = self.request.query_params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search))
        return qs
