from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm as BaseUserChangeForm
from .models import User


class UserCreationForm(BaseUserCreationForm):
    class Meta:
        model = User
        fields = ('email', 'name')


class UserChangeForm(BaseUserChangeForm):
    class Meta:
        model = User
        fields = ('email', 'name')
