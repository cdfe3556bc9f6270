from rest_framework import serializers
from .models import User, BusinessUnit, Role, UserBusinessUnit, AuditLog


def business_unit_lookup(model):
    """ORM path from a model to its business unit, None for global models"""
    lookup = getattr(model, 'business_unit_lookup', None)
    if lookup:
        return lookup
    if any(field.name == 'business_unit' for field in model._meta.fields):
        return 'business_unit'
    return None


class BusinessUnitScopedMixin:
    """
    Restrict related-object choices to the business unit in ``context['business_unit']``.
    A reference to another unit's object then fails validation like a missing pk.
    """
    def get_fields(self):
        fields = super().get_fields()
        business_unit = self.context.get('business_unit')
        if business_unit is None:
            return fields
        for field in fields.values():
            relation = getattr(field, 'child_relation', field)
            queryset = getattr(relation, 'queryset', None)
            lookup = business_unit_lookup(queryset.model) if queryset is not None else None
            if lookup:
                relation.queryset = queryset.filter(**{lookup: business_unit})
        return fields


class BusinessUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessUnit
        fields = ['id', 'name', 'code', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class RoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ['id', 'name', 'description']


class AssignmentSerializer(serializers.ModelSerializer):
    business_unit_name = serializers.CharField(source='business_unit.name', read_only=True)
    business_unit_code = serializers.CharField(source='business_unit.code', read_only=True)
    role_name = serializers.CharField(source='role.name', read_only=True)

    class Meta:
        model = UserBusinessUnit
        fields = ['id', 'business_unit', 'business_unit_name', 'business_unit_code', 'role', 'role_name']


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'is_active', 'is_staff', 'is_superuser', 'created_at', 'updated_at']
        read_only_fields = ['is_staff', 'is_superuser', 'created_at', 'updated_at']


class UserWithAssignmentsSerializer(UserSerializer):
    assignments = AssignmentSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['assignments']


class UnitUserSerializer(serializers.ModelSerializer):
    """A user as seen from one business unit: includes the role of that assignment"""
    role = serializers.SerializerMethodField()
    role_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'is_active', 'role', 'role_name', 'created_at']

    def _assignment(self, obj):
        business_unit = self.context.get('business_unit')
        for assignment in obj.assignments.all():
            if assignment.business_unit_id == business_unit.id:
                return assignment
        return None

    def get_role(self, obj):
        assignment = self._assignment(obj)
        return assignment.role_id if assignment else None

    def get_role_name(self, obj):
        assignment = self._assignment(obj)
        return assignment.role.name if assignment else None


class UnitUserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.PrimaryKeyRelatedField(queryset=Role.objects.all())


class UnitUserUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, required=False)
    name = serializers.CharField(max_length=150, required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.PrimaryKeyRelatedField(queryset=Role.objects.all(), required=False)


class PasswordChangeSerializer(serializers.Serializer):
    new_password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords don't match"})
        return attrs


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'username', 'business_unit', 'action', 'model_name', 'object_id',
                  'object_name', 'object_reference', 'changes', 'ip_address', 'created_at']
