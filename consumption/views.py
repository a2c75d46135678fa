import logging
from decimal import Decimal

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from analytics import records
from analytics.catalog import CONSUMABLE_TYPES, DEFAULT_GRAMS_PER_UNIT, RAW_PRODUCT_TYPES, method_efficiency, parse_method
from analytics.inventory import conversion_preview
from greenery.request_utils import (
    json_error,
    parse_day,
    parse_decimal,
    parse_int,
    parse_json_body,
    parse_timestamp,
    validation_message,
)
from greenery.timezone_utils import get_user_timezone
from mood.models import MoodTracking
from mood.services.correlation_cache import refresh_correlations
from .models import Consumable, ConsumptionEntry, RawProduct

logger = logging.getLogger(__name__)

RECENT_ENTRIES_LIMIT = 10


def serialize_entry(entry):
    """Serialize a consumption entry for JSON responses."""
    efficiency = method_efficiency(entry.consumption_method)
    return {
        'id': entry.id,
        'product_name': entry.product_name,
        'amount': float(entry.amount),
        'consumption_method': entry.consumption_method or None,
        'efficiency_percent': round(efficiency * 100),
        'effective_amount': round(float(entry.amount) * efficiency, 3),
        'consumable_id': entry.consumable_id,
        'units_consumed': float(entry.units_consumed) if entry.units_consumed is not None else None,
        'rating': entry.rating,
        'notes': entry.notes,
        'consumed_at': entry.consumed_at.isoformat(),
    }


@login_required
@require_http_methods(["POST"])
def log_entry(request):
    """
    AJAX endpoint to log a consumption session.

    Expects JSON data:
        - product_name: string (optional when consumable_id or raw_product_id is given)
        - amount: number - grams (optional for consumables: units * grams_per_unit)
        - consumption_method: string (Smoked, Vaporised, Eaten, Tincture, Topical)
        - consumable_id: integer - deducts units_consumed (default 1) from the consumable
        - raw_product_id: integer - deducts amount from the raw product
        - units_consumed: number
        - rating: integer 1-5
        - notes: string
        - consumed_at: ISO 8601 datetime (default: now)

    Returns JSON:
        - success: boolean
        - message: string
        - entry_id: integer (if successful)
    """
    try:
        data = parse_json_body(request)

        method = None
        if data.get('consumption_method'):
            method = parse_method(data['consumption_method'])
            if method is None:
                return json_error(f"Unknown consumption method: {data['consumption_method']}")

        rating = parse_int(data, 'rating', required=False, minimum=1, maximum=5)
        consumed_at = parse_timestamp(data, 'consumed_at', tz=get_user_timezone(request))
        units_consumed = parse_decimal(data, 'units_consumed', required=False, positive=True)
        amount = parse_decimal(data, 'amount', required=False, positive=True)
        product_name = (data.get('product_name') or '').strip()
        consumable_id = parse_int(data, 'consumable_id', required=False)
        raw_product_id = parse_int(data, 'raw_product_id', required=False)

        with transaction.atomic():
            consumable = None
            if consumable_id:
                consumable = Consumable.objects.select_for_update().filter(
                    user=request.user, id=consumable_id
                ).first()
                if consumable is None:
                    return json_error('Consumable not found', status=404)
                if units_consumed is None:
                    units_consumed = Decimal('1')
                if units_consumed != units_consumed.to_integral_value():
                    return json_error('units_consumed must be a whole number for consumables')
                if units_consumed > consumable.quantity:
                    return json_error(f'Only {consumable.quantity} unit(s) of {consumable.name} left')
                if amount is None:
                    grams_per_unit = consumable.grams_per_unit or Decimal(str(DEFAULT_GRAMS_PER_UNIT))
                    amount = units_consumed * grams_per_unit
                product_name = product_name or consumable.source_strain or consumable.name
                consumable.quantity -= int(units_consumed)
                consumable.save(update_fields=['quantity', 'updated_at'])

            elif raw_product_id:
                product = RawProduct.objects.select_for_update().filter(
                    user=request.user, id=raw_product_id
                ).first()
                if product is None:
                    return json_error('Raw product not found', status=404)
                if amount is None:
                    return json_error('amount is required')
                if amount > product.current_amount:
                    return json_error(f'Only {product.current_amount}g of {product.strain_name} left')
                product_name = product_name or product.strain_name
                product.current_amount -= amount
                product.save(update_fields=['current_amount', 'updated_at'])

            if not product_name:
                return json_error('product_name is required')
            if amount is None:
                return json_error('amount is required')

            entry = ConsumptionEntry.objects.create(
                user=request.user,
                product_name=product_name,
                amount=amount,
                consumption_method=method.value if method else '',
                consumable=consumable,
                units_consumed=units_consumed,
                rating=rating,
                notes=data.get('notes') or '',
                consumed_at=consumed_at,
            )

        logger.info("Logged %sg of %s for user %s", amount, product_name, request.user.pk)
        return JsonResponse({
            'success': True,
            'message': f'Logged {amount}g of {product_name}',
            'entry_id': entry.id,
            'amount': float(entry.amount),
            'consumed_at': consumed_at.isoformat(),
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error logging consumption entry")
        return json_error(f'Error logging entry: {str(e)}', status=500)


@login_required
@require_http_methods(["POST"])
def add_raw_product(request):
    """
    AJAX endpoint to record a raw product purchase.

    Expects JSON data:
        - strain_name: string
        - product_type: string (Flower-Buds, Hash)
        - amount: number - grams purchased
        - cost, thc_content, cbd_content: numbers (optional)
        - source, quality_notes: strings (optional)
        - purchase_date: YYYY-MM-DD
    """
    try:
        data = parse_json_body(request)

        strain_name = (data.get('strain_name') or '').strip()
        if not strain_name:
            return json_error('strain_name is required')

        product_type = data.get('product_type') or 'Flower-Buds'
        if product_type not in RAW_PRODUCT_TYPES:
            return json_error(f'Unknown product type: {product_type}')

        amount = parse_decimal(data, 'amount', positive=True)
        cost = parse_decimal(data, 'cost', required=False, minimum=0)
        thc_content = parse_decimal(data, 'thc_content', required=False, minimum=0, maximum=100)
        cbd_content = parse_decimal(data, 'cbd_content', required=False, minimum=0, maximum=100)
        purchase_date = parse_day(data, 'purchase_date')

        product = RawProduct.objects.create(
            user=request.user,
            product_type=product_type,
            strain_name=strain_name,
            source=data.get('source') or '',
            quality_notes=data.get('quality_notes') or '',
            thc_content=thc_content,
            cbd_content=cbd_content,
            current_amount=amount,
            original_amount=amount,
            cost=cost,
            purchase_date=purchase_date,
        )

        return JsonResponse({
            'success': True,
            'message': f'Added {amount}g of {strain_name}',
            'product_id': product.id,
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error adding raw product")
        return json_error(f'Error adding product: {str(e)}', status=500)


@login_required
@require_http_methods(["POST"])
def convert_to_consumable(request):
    """
    AJAX endpoint to convert part of a raw product into consumable units.

    Expects JSON data:
        - raw_product_id: integer
        - consumable_type: string (Joints, Cartridges, Edibles)
        - quantity: integer - units to make
        - grams_per_unit: number (optional, defaults to the type's default weight)
        - name: string (optional)

    Cost per unit is derived from the raw product's purchase price per gram.
    """
    try:
        data = parse_json_body(request)

        consumable_type = data.get('consumable_type')
        if consumable_type not in CONSUMABLE_TYPES:
            return json_error(f'Unknown consumable type: {consumable_type}')

        quantity = parse_int(data, 'quantity', minimum=1)
        raw_product_id = parse_int(data, 'raw_product_id')
        grams_per_unit = parse_decimal(data, 'grams_per_unit', required=False, positive=True)

        with transaction.atomic():
            product = RawProduct.objects.select_for_update().filter(
                user=request.user, id=raw_product_id
            ).first()
            if product is None:
                return json_error('Raw product not found', status=404)

            preview = conversion_preview(
                records.RawProduct.from_mapping(vars(product)),
                consumable_type,
                grams_per_unit,
            )
            if quantity > preview.units:
                return json_error(
                    f'{product.strain_name} has {product.current_amount}g left, '
                    f'enough for {preview.units} unit(s)'
                )

            unit_weight = Decimal(str(preview.grams_per_unit))
            product.current_amount -= unit_weight * quantity
            product.save(update_fields=['current_amount', 'updated_at'])

            consumable = Consumable.objects.create(
                user=request.user,
                consumable_type=consumable_type,
                name=data.get('name') or f'{product.strain_name} {consumable_type}',
                quantity=quantity,
                grams_per_unit=unit_weight,
                cost_per_unit=Decimal(str(round(preview.cost_per_unit, 2))),
                source_strain=product.strain_name,
                thc_content=product.thc_content,
            )

        logger.info("Converted %s x %s from raw product %s", quantity, consumable_type, product.id)
        return JsonResponse({
            'success': True,
            'message': f'Made {quantity} {consumable_type.lower()} from {product.strain_name}',
            'consumable_id': consumable.id,
            'remaining_amount': float(product.current_amount),
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error converting raw product")
        return json_error(f'Error converting product: {str(e)}', status=500)


def _has_mood(entry):
    return MoodTracking.objects.filter(consumption_entry=entry).exists()


@login_required
@require_http_methods(["GET"])
def recent_entries(request):
    """
    AJAX endpoint listing the latest sessions, newest first.

    Query parameters:
        - limit: integer 1-100 (default 10)
    """
    try:
        limit = parse_int(request.GET, 'limit', required=False, minimum=1, maximum=100) or RECENT_ENTRIES_LIMIT
        entries = ConsumptionEntry.objects.filter(user=request.user).order_by('-consumed_at', '-id')[:limit]
        return JsonResponse({
            'success': True,
            'entries': [serialize_entry(entry) for entry in entries],
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error listing recent entries")
        return json_error(f'Error listing entries: {str(e)}', status=500)


@login_required
@require_http_methods(["PATCH"])
def update_entry(request, entry_id):
    """
    AJAX endpoint to edit a logged session. Only the fields present are changed.

    Accepts JSON data:
        - product_name, notes: strings
        - amount: number - grams
        - consumption_method: string, or empty to clear it
        - rating: integer 1-5, or null to clear it
        - consumed_at: ISO 8601 datetime

    Stock that was deducted when the session was logged is left as it is.
    """
    try:
        entry = ConsumptionEntry.objects.get(user=request.user, id=entry_id)
        data = parse_json_body(request)

        if 'product_name' in data:
            product_name = (data['product_name'] or '').strip()
            if not product_name:
                return json_error('product_name cannot be empty')
            entry.product_name = product_name
        if 'amount' in data:
            entry.amount = parse_decimal(data, 'amount', positive=True)
        if 'consumption_method' in data:
            method = None
            if data['consumption_method']:
                method = parse_method(data['consumption_method'])
                if method is None:
                    return json_error(f"Unknown consumption method: {data['consumption_method']}")
            entry.consumption_method = method.value if method else ''
        if 'rating' in data:
            entry.rating = parse_int(data, 'rating', required=False, minimum=1, maximum=5)
        if 'consumed_at' in data:
            entry.consumed_at = parse_timestamp(data, 'consumed_at', tz=get_user_timezone(request))
        if 'notes' in data:
            entry.notes = data['notes'] or ''

        entry.save()
        if _has_mood(entry):
            refresh_correlations(request.user)

        return JsonResponse({
            'success': True,
            'message': 'Entry updated',
            'entry': serialize_entry(entry),
        })

    except ConsumptionEntry.DoesNotExist:
        return json_error('Consumption entry not found', status=404)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error updating consumption entry")
        return json_error(f'Error updating entry: {str(e)}', status=500)


@login_required
@require_http_methods(["DELETE"])
def delete_entry(request, entry_id):
    """
    AJAX endpoint to delete a logged session along with its mood check-in.
    Stock that was deducted when the session was logged is not restored.
    """
    try:
        entry = ConsumptionEntry.objects.get(user=request.user, id=entry_id)
        had_mood = _has_mood(entry)
        entry.delete()
        if had_mood:
            refresh_correlations(request.user)

        return JsonResponse({'success': True, 'message': 'Entry deleted'})

    except ConsumptionEntry.DoesNotExist:
        return json_error('Consumption entry not found', status=404)
    except Exception as e:
        logger.exception("Error deleting consumption entry")
        return json_error(f'Error deleting entry: {str(e)}', status=500)


@login_required
@require_http_methods(["PATCH"])
def update_raw_product(request, product_id):
    """
    AJAX endpoint to edit a raw product. Only the fields present are changed.

    Accepts JSON data:
        - strain_name, source, quality_notes: strings
        - product_type: string (Flower-Buds, Hash)
        - original_amount, current_amount: numbers - grams
        - cost, thc_content, cbd_content: numbers, or null to clear them
        - purchase_date: YYYY-MM-DD

    current_amount may not exceed original_amount.
    """
    try:
        product = RawProduct.objects.get(user=request.user, id=product_id)
        data = parse_json_body(request)

        if 'strain_name' in data:
            strain_name = (data['strain_name'] or '').strip()
            if not strain_name:
                return json_error('strain_name cannot be empty')
            product.strain_name = strain_name
        if 'product_type' in data:
            if data['product_type'] not in RAW_PRODUCT_TYPES:
                return json_error(f"Unknown product type: {data['product_type']}")
            product.product_type = data['product_type']
        if 'original_amount' in data:
            product.original_amount = parse_decimal(data, 'original_amount', positive=True)
        if 'current_amount' in data:
            product.current_amount = parse_decimal(data, 'current_amount', minimum=0)
        if 'cost' in data:
            product.cost = parse_decimal(data, 'cost', required=False, minimum=0)
        for field in ('thc_content', 'cbd_content'):
            if field in data:
                setattr(product, field, parse_decimal(data, field, required=False, minimum=0, maximum=100))
        if 'purchase_date' in data:
            product.purchase_date = parse_day(data, 'purchase_date')
        for field in ('source', 'quality_notes'):
            if field in data:
                setattr(product, field, data[field] or '')

        if product.current_amount > product.original_amount:
            return json_error('current_amount cannot be more than original_amount')

        product.save()
        return JsonResponse({
            'success': True,
            'message': f'Updated {product.strain_name}',
            'product_id': product.id,
            'current_amount': float(product.current_amount),
        })

    except RawProduct.DoesNotExist:
        return json_error('Raw product not found', status=404)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error updating raw product")
        return json_error(f'Error updating product: {str(e)}', status=500)


@login_required
@require_http_methods(["DELETE"])
def delete_raw_product(request, product_id):
    """AJAX endpoint to delete a raw product. Consumables made from it are kept."""
    try:
        product = RawProduct.objects.get(user=request.user, id=product_id)
        product.delete()
        return JsonResponse({'success': True, 'message': f'Deleted {product.strain_name}'})

    except RawProduct.DoesNotExist:
        return json_error('Raw product not found', status=404)
    except Exception as e:
        logger.exception("Error deleting raw product")
        return json_error(f'Error deleting product: {str(e)}', status=500)


@login_required
@require_http_methods(["PATCH"])
def update_consumable(request, consumable_id):
    """
    AJAX endpoint to edit a consumable. Only the fields present are changed.

    Accepts JSON data:
        - name, notes: strings
        - consumable_type: string (Joints, Cartridges, Edibles)
        - quantity: integer - units left
        - grams_per_unit, cost_per_unit: numbers, or null to clear them
    """
    try:
        consumable = Consumable.objects.get(user=request.user, id=consumable_id)
        data = parse_json_body(request)

        if 'name' in data:
            name = (data['name'] or '').strip()
            if not name:
                return json_error('name cannot be empty')
            consumable.name = name
        if 'consumable_type' in data:
            if data['consumable_type'] not in CONSUMABLE_TYPES:
                return json_error(f"Unknown consumable type: {data['consumable_type']}")
            consumable.consumable_type = data['consumable_type']
        if 'quantity' in data:
            consumable.quantity = parse_int(data, 'quantity', minimum=0)
        if 'grams_per_unit' in data:
            consumable.grams_per_unit = parse_decimal(data, 'grams_per_unit', required=False, positive=True)
        if 'cost_per_unit' in data:
            consumable.cost_per_unit = parse_decimal(data, 'cost_per_unit', required=False, minimum=0)
        if 'notes' in data:
            consumable.notes = data['notes'] or ''

        consumable.save()
        return JsonResponse({
            'success': True,
            'message': f'Updated {consumable.name}',
            'consumable_id': consumable.id,
            'quantity': consumable.quantity,
        })

    except Consumable.DoesNotExist:
        return json_error('Consumable not found', status=404)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error updating consumable")
        return json_error(f'Error updating consumable: {str(e)}', status=500)


@login_required
@require_http_methods(["DELETE"])
def delete_consumable(request, consumable_id):
    """AJAX endpoint to delete a consumable. Sessions logged from it are kept."""
    try:
        consumable = Consumable.objects.get(user=request.user, id=consumable_id)
        consumable.delete()
        return JsonResponse({'success': True, 'message': f'Deleted {consumable.name}'})

    except Consumable.DoesNotExist:
        return json_error('Consumable not found', status=404)
    except Exception as e:
        logger.exception("Error deleting consumable")
        return json_error(f'Error deleting consumable: {str(e)}', status=500)


@login_required
@require_http_methods(["POST"])
def archive_consumable(request, consumable_id):
    """
    AJAX endpoint to archive (or unarchive) a consumable. Archived consumables
    no longer count towards inventory.

    Accepts JSON data:
        - archived: boolean (default true)
    """
    try:
        consumable = Consumable.objects.get(user=request.user, id=consumable_id)
        data = parse_json_body(request)

        consumable.is_archived = bool(data.get('archived', True))
        consumable.save(update_fields=['is_archived', 'updated_at'])

        return JsonResponse({
            'success': True,
            'message': f"{'Archived' if consumable.is_archived else 'Unarchived'} {consumable.name}",
            'consumable_id': consumable.id,
            'is_archived': consumable.is_archived,
        })

    except Consumable.DoesNotExist:
        return json_error('Consumable not found', status=404)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error archiving consumable")
        return json_error(f'Error archiving consumable: {str(e)}', status=500)
