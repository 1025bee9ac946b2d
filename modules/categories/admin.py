"""
Categories admin configuration.

The taxonomy trees are shown read-only here; they change through the API so
that depth and sibling rules apply. Attribute edits are saved through the
repository and carry the version the form was rendered with.
"""
from django import forms
from django.contrib import admin

from .exceptions import InvalidTaxonomyNameError
from .models import CategoryModel
from .repositories import CategoryRepository
from .services import category_slug, invalidate_catalog


class CategoryAdminForm(forms.ModelForm):
    """Category attribute form with a hidden version stamp."""

    class Meta:
        model = CategoryModel
        fields = ['name', 'icon', 'color', 'version']
        widgets = {'version': forms.HiddenInput}

    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        try:
            slug = category_slug(name)
        except InvalidTaxonomyNameError as e:
            raise forms.ValidationError(e.message)

        if CategoryRepository().exists_with_name(name, slug, exclude_id=self.instance.pk):
            raise forms.ValidationError(f"Category '{name}' already exists")
        return name

    def clean(self):
        cleaned_data = super().clean()
        # self.instance still holds the stored row at this point
        if self.instance.pk and cleaned_data.get('version') != self.instance.version:
            raise forms.ValidationError(
                "This category was changed after the page was loaded. "
                "Reload it and apply your changes again."
            )
        return cleaned_data


@admin.register(CategoryModel)
class CategoryAdmin(admin.ModelAdmin):
    """Admin for categories."""

    form = CategoryAdminForm
    list_display = [
        'id',
        'name',
        'slug',
        'created_by',
        'version',
        'created_at',
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'slug']
    readonly_fields = [
        'id', 'slug', 'created_by', 'legacy_subcategories', 'nodes',
        'created_at', 'updated_at',
    ]
    ordering = ['-created_at']

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'icon', 'color', 'created_by', 'version')
        }),
        ('Taxonomy', {
            'fields': ('legacy_subcategories', 'nodes'),
            'classes': ('collapse',)
        }),
        ('Info', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def save_model(self, request, obj, form, change):
        obj.slug = category_slug(obj.name)
        if change:
            CategoryRepository().save(obj)
        else:
            obj.created_by = request.user
            super().save_model(request, obj, form, change)
        invalidate_catalog()

    def delete_model(self, request, obj):
        super().delete_model(request, obj)
        invalidate_catalog()

    def delete_queryset(self, request, queryset):
        super().delete_queryset(request, queryset)
        invalidate_catalog()
